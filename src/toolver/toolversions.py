from __future__ import annotations

from pathlib import Path

from toolver.errors import ToolVersionsParseError


def parse(text: str) -> dict[str, list[str]]:
    tools: dict[str, list[str]] = {}
    for line in text.splitlines():
        fields = line.split("#", 1)[0].split()
        if not fields:
            continue
        tools[fields[0]] = fields[1:]
    return tools


def read(path: Path) -> dict[str, list[str]]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ToolVersionsParseError(
            f"Could not read {path}.", "Check that it is a readable text file."
        ) from exc
    return parse(text)


def find_tool_versions(path: Path, plugin_name: str) -> tuple[list[str], bool]:
    versions = read(path).get(plugin_name, [])
    return versions, bool(versions)
