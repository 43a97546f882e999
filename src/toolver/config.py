from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from typing import Mapping

from toolver.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = "~/.asdf"
DEFAULT_CONFIG_FILE = "~/.asdfrc"
DEFAULT_TOOL_VERSIONS_FILENAME = ".tool-versions"


@dataclass(frozen=True)
class Config:
    data_dir: Path
    config_file: Path
    default_tool_versions_filename: str = DEFAULT_TOOL_VERSIONS_FILENAME

    @classmethod
    def load(cls, environ: Mapping[str, str] | None = None) -> Config:
        env = os.environ if environ is None else environ
        filename = env.get("ASDF_DEFAULT_TOOL_VERSIONS_FILENAME", "").strip()
        return cls(
            data_dir=Path(env.get("ASDF_DATA_DIR") or DEFAULT_DATA_DIR).expanduser(),
            config_file=Path(env.get("ASDF_CONFIG_FILE") or DEFAULT_CONFIG_FILE).expanduser(),
            default_tool_versions_filename=filename or DEFAULT_TOOL_VERSIONS_FILENAME,
        )

    def plugins_dir(self) -> Path:
        return self.data_dir / "plugins"

    def installs_dir(self) -> Path:
        return self.data_dir / "installs"

    @cached_property
    def settings(self) -> dict[str, str]:
        """``key = value`` pairs from the config file, read once per instance.

        A missing file yields no settings. Any other read failure is raised
        as :class:`ConfigError` so a broken config never looks like an empty one.
        """
        try:
            text = self.config_file.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigError(
                f"Could not read config file {self.config_file}.",
                "Check the file permissions or set ASDF_CONFIG_FILE.",
            ) from exc

        settings: dict[str, str] = {}
        for line in text.splitlines():
            line = line.split("#", 1)[0].strip()
            if not line or "=" not in line:
                continue
            key, value = line.split("=", 1)
            settings[key.strip()] = value.strip()
        return settings

    def legacy_version_file(self) -> bool:
        enabled = self.settings.get("legacy_version_file", "no") == "yes"
        logger.debug("legacy_version_file=%s (from %s)", enabled, self.config_file)
        return enabled
