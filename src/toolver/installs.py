from __future__ import annotations

from pathlib import Path

from toolver.config import Config
from toolver.errors import InstallsError
from toolver.plugins import Plugin

REF_PREFIX = "ref:"
REF_DIR_PREFIX = "ref-"


def plugin_installs_dir(conf: Config, plugin: Plugin) -> Path:
    return conf.installs_dir() / plugin.name


def installed(conf: Config, plugin: Plugin) -> list[str]:
    root = plugin_installs_dir(conf, plugin)
    try:
        entries = list(root.iterdir())
    except FileNotFoundError:
        return []
    except OSError as exc:
        raise InstallsError(
            f"Could not list installed versions of {plugin.name}.", str(exc)
        ) from exc

    versions: list[str] = []
    for entry in entries:
        if not entry.is_dir():
            continue
        name = entry.name
        if name.startswith(REF_DIR_PREFIX):
            name = REF_PREFIX + name[len(REF_DIR_PREFIX):]
        versions.append(name)
    return versions


def install_path(conf: Config, plugin: Plugin, version: str) -> Path:
    if version.startswith(REF_PREFIX):
        version = REF_DIR_PREFIX + version[len(REF_PREFIX):]
    return plugin_installs_dir(conf, plugin) / version


def is_installed(conf: Config, plugin: Plugin, version: str) -> bool:
    return install_path(conf, plugin, version).is_dir()
