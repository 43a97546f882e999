from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from toolver.config import Config


@dataclass
class FakePlugin:
    name: str
    legacy_names: list[str] = field(default_factory=list)
    legacy_versions: dict[str, list[str]] = field(default_factory=dict)
    parsed: list[Path] = field(default_factory=list)
    error: Exception | None = None
    parse_error: Exception | None = None

    def legacy_filenames(self) -> list[str]:
        if self.error is not None:
            raise self.error
        return list(self.legacy_names)

    def parse_legacy_version_file(self, path: Path) -> list[str]:
        self.parsed.append(path)
        if self.parse_error is not None:
            raise self.parse_error
        return list(self.legacy_versions.get(path.name, []))


@pytest.fixture
def conf(tmp_path: Path) -> Config:
    return Config(data_dir=tmp_path / ".asdf", config_file=tmp_path / ".asdfrc")


@pytest.fixture
def legacy_conf(conf: Config) -> Config:
    conf.config_file.write_text("legacy_version_file = yes\n", encoding="utf-8")
    return conf


@pytest.fixture
def nodejs() -> FakePlugin:
    return FakePlugin(name="nodejs")
