from __future__ import annotations

from pathlib import Path
from typing import Mapping

from toolver import installs, resolver
from toolver.config import Config
from toolver.errors import VersionNotConfiguredError, VersionNotInstalledError
from toolver.plugins import Plugin

SYSTEM_VERSION = "system"


def select_version(
    conf: Config,
    plugin: Plugin,
    start: Path,
    environ: Mapping[str, str] | None = None,
) -> tuple[str, resolver.ToolVersions]:
    tool_versions, found = resolver.resolve_version(conf, plugin, start, environ=environ)
    if not found:
        raise VersionNotConfiguredError(
            f"No version is set for {plugin.name}.",
            f"Add it to {conf.default_tool_versions_filename} or set "
            f"{resolver.variable_version_name(plugin.name)}.",
        )

    for version in tool_versions.versions:
        if version == SYSTEM_VERSION or installs.is_installed(conf, plugin, version):
            return version, tool_versions

    best = resolver.find_best_matching_version(conf, plugin, tool_versions.versions, environ=environ)
    if best:
        return best, tool_versions

    requested = " ".join(tool_versions.versions) or "(none)"
    raise VersionNotInstalledError(
        f"No installed {plugin.name} version matches {requested}.",
        f"Run: asdf install {plugin.name} {tool_versions.versions[0]}"
        if tool_versions.versions
        else None,
    )
