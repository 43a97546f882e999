"""Resolve which version(s) of a tool are active for a directory.

Resolution order: the ``ASDF_<TOOL>_VERSION`` environment variable, then the
pin file and (when enabled) legacy version files of each directory from the
start directory up to the filesystem root, then the home directory.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping

from toolver import installs, toolversions
from toolver.config import Config
from toolver.errors import FilesystemError, ToolverError
from toolver.plugins import Plugin

logger = logging.getLogger(__name__)

InstalledProvider = Callable[[Config, Plugin], list[str]]


@dataclass
class ToolVersions:
    versions: list[str] = field(default_factory=list)
    directory: Path | None = None
    source: str = ""


def variable_version_name(tool_name: str) -> str:
    return f"ASDF_{tool_name.upper()}_VERSION"


def parse_version(raw_versions: str) -> list[str]:
    versions: list[str] = []
    for version in raw_versions.split(" "):
        version = version.strip()
        if version:
            versions.append(version)
    return versions


def find_versions_in_env(
    plugin_name: str, environ: Mapping[str, str] | None = None
) -> tuple[list[str], str, bool]:
    env = os.environ if environ is None else environ
    name = variable_version_name(plugin_name)
    raw = env.get(name, "")
    if raw == "":
        return [], name, False
    # A value made only of spaces still counts as set.
    return parse_version(raw), name, True


def _exists(path: Path) -> bool:
    try:
        path.stat()
    except (FileNotFoundError, NotADirectoryError):
        return False
    except OSError as exc:
        raise FilesystemError(f"Could not access {path}.", str(exc)) from exc
    return True


def find_versions_in_legacy_file(plugin: Plugin, directory: Path) -> tuple[ToolVersions, bool]:
    for filename in plugin.legacy_filenames():
        path = directory / filename
        if not _exists(path):
            continue
        versions = plugin.parse_legacy_version_file(path)
        if not versions or versions == [""]:
            logger.debug("legacy file %s has no version for %s", path, plugin.name)
            return ToolVersions(), False
        return ToolVersions(versions=versions, directory=directory, source=filename), True
    return ToolVersions(), False


def find_versions_in_dir(conf: Config, plugin: Plugin, directory: Path) -> tuple[ToolVersions, bool]:
    filename = conf.default_tool_versions_filename
    path = directory / filename
    if _exists(path):
        versions, found = toolversions.find_tool_versions(path, plugin.name)
        if found:
            return ToolVersions(versions=versions, directory=directory, source=filename), True

    if conf.legacy_version_file():
        return find_versions_in_legacy_file(plugin, directory)

    return ToolVersions(), False


def resolve_version(
    conf: Config,
    plugin: Plugin,
    start: Path,
    environ: Mapping[str, str] | None = None,
    home_dir: Callable[[], Path] | None = None,
) -> tuple[ToolVersions, bool]:
    """Resolve the versions of ``plugin`` active in ``start``.

    ``environ`` defaults to ``os.environ`` and also supplies ``HOME`` for the
    home directory fallback unless ``home_dir`` is given.
    """
    env = os.environ if environ is None else environ
    versions, env_name, found = find_versions_in_env(plugin.name, env)
    if found:
        logger.debug("%s resolved from %s", plugin.name, env_name)
        return ToolVersions(versions=versions, source=env_name), True

    directory = Path(start)
    while True:
        tool_versions, found = find_versions_in_dir(conf, plugin, directory)
        if found:
            logger.debug("%s resolved from %s in %s", plugin.name, tool_versions.source, directory)
            return tool_versions, True

        parent = directory.parent
        if parent != directory:
            directory = parent
            continue

        # Root reached: the home directory gets one last, non-recursive probe.
        try:
            home = home_dir() if home_dir is not None else _home_from(env)
        except (RuntimeError, KeyError, OSError):
            logger.debug("no home directory to probe for %s", plugin.name)
            return ToolVersions(), False
        logger.debug("probing home directory %s for %s", home, plugin.name)
        return find_versions_in_dir(conf, plugin, Path(home))


def _home_from(env: Mapping[str, str]) -> Path:
    home = env.get("HOME", "")
    if home:
        return Path(home)
    return Path.home()


def _split_policy(env: Mapping[str, str], name: str) -> list[str]:
    # "".split(" ") is [""], so an unset variable is never an empty list.
    return env.get(name, "").split(" ")


def find_best_matching_version(
    conf: Config,
    plugin: Plugin,
    versions: list[str],
    environ: Mapping[str, str] | None = None,
    installed: InstalledProvider | None = None,
) -> str:
    """Pick an installed version to stand in for the requested ``versions``.

    Driven by ``ASDF_IGNORE_VERSION``, ``ASDF_IGNORE_PATCH`` and
    ``ASDF_IGNORE_MINOR``, each a space separated list of plugin names or
    ``*`` for every plugin:

    - ignore version: the greatest installed version, whatever was requested.
    - ignore patch: the greatest installed version whose ``major.minor``
      prefixes a requested version.
    - ignore minor: the greatest installed version whose ``major`` prefixes a
      requested version.

    Versions are ordered and matched as plain strings, so ``"9.0.0"`` sorts
    above ``"10.0.0"``. Returns ``""`` when nothing applies, including when
    installed versions cannot be listed.
    """
    env = os.environ if environ is None else environ
    try:
        available = (installed or installs.installed)(conf, plugin)
    except (ToolverError, OSError) as exc:
        logger.debug("ignoring install listing failure for %s: %s", plugin.name, exc)
        return ""

    ignore_patches = _split_policy(env, "ASDF_IGNORE_PATCH")
    ignore_minors = _split_policy(env, "ASDF_IGNORE_MINOR")
    ignore_versions = _split_policy(env, "ASDF_IGNORE_VERSION")

    available = sorted(available, reverse=True)
    if plugin.name in ignore_versions or "*" in ignore_versions:
        return available[0] if available else ""

    if not ignore_patches and not ignore_minors:
        return ""

    requested = sorted(versions, reverse=True)
    patch_relaxed = plugin.name in ignore_patches or "*" in ignore_patches
    minor_relaxed = plugin.name in ignore_minors or "*" in ignore_minors
    for candidate in available:
        parts = candidate.split(".")
        if patch_relaxed:
            major_minor = ".".join(parts[:2])
            if any(v.startswith(major_minor) for v in requested):
                logger.debug("%s %s matches %s on major.minor", plugin.name, candidate, requested)
                return candidate
        if minor_relaxed:
            major = parts[0]
            if any(v.startswith(major) for v in requested):
                logger.debug("%s %s matches %s on major", plugin.name, candidate, requested)
                return candidate
    return ""
