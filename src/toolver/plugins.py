from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from toolver.config import Config
from toolver.errors import PluginCallbackError, PluginMissingError

logger = logging.getLogger(__name__)

LIST_LEGACY_FILENAMES = "list-legacy-filenames"
PARSE_LEGACY_FILE = "parse-legacy-file"


class Plugin(Protocol):
    name: str

    def legacy_filenames(self) -> list[str]: ...

    def parse_legacy_version_file(self, path: Path) -> list[str]: ...


@dataclass(frozen=True)
class ScriptPlugin:
    """Plugin backed by callback scripts in ``<dir>/bin``."""

    name: str
    dir: Path

    def callback_path(self, callback: str) -> Path:
        return self.dir / "bin" / callback

    def run_callback(self, callback: str, *args: str) -> str:
        script = self.callback_path(callback)
        logger.debug("running %s callback %s %s", self.name, script, list(args))
        try:
            proc = subprocess.run(
                [str(script), *args], check=True, capture_output=True, text=True
            )
        except subprocess.CalledProcessError as exc:
            raise PluginCallbackError(
                f"Plugin {self.name} callback {callback} failed with exit code {exc.returncode}.",
                exc.stderr.strip() or None,
            ) from exc
        except OSError as exc:
            raise PluginCallbackError(
                f"Plugin {self.name} callback {callback} could not be executed.", str(exc)
            ) from exc
        return proc.stdout

    def legacy_filenames(self) -> list[str]:
        if not self.callback_path(LIST_LEGACY_FILENAMES).exists():
            return []
        return self.run_callback(LIST_LEGACY_FILENAMES).split()

    def parse_legacy_version_file(self, path: Path) -> list[str]:
        if self.callback_path(PARSE_LEGACY_FILE).exists():
            raw = self.run_callback(PARSE_LEGACY_FILE, str(path))
        else:
            try:
                raw = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                raise PluginCallbackError(
                    f"Could not read legacy version file {path}.", str(exc)
                ) from exc
        # Tokens are kept unfiltered; an empty file comes back as [""].
        return [token.strip() for token in raw.strip().split(" ")]


def plugin_dir(conf: Config, name: str) -> Path:
    return conf.plugins_dir() / name


def get_plugin(conf: Config, name: str) -> ScriptPlugin:
    directory = plugin_dir(conf, name)
    if not directory.is_dir():
        raise PluginMissingError(
            f"Plugin {name} is not installed.", f"Run: asdf plugin add {name}"
        )
    return ScriptPlugin(name=name, dir=directory)


def list_plugins(conf: Config) -> list[ScriptPlugin]:
    root = conf.plugins_dir()
    if not root.exists():
        return []
    return [
        ScriptPlugin(name=entry.name, dir=entry)
        for entry in sorted(root.iterdir())
        if entry.is_dir()
    ]
