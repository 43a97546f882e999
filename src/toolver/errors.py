from __future__ import annotations


class ToolverError(Exception):
    """Base exception with user-facing remediation text."""

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint

    def format(self) -> str:
        if self.hint:
            return f"{self.message} {self.hint}"
        return self.message


class ConfigError(ToolverError):
    pass


class FilesystemError(ToolverError):
    pass


class ToolVersionsParseError(ToolverError):
    pass


class PluginMissingError(ToolverError):
    pass


class PluginCallbackError(ToolverError):
    pass


class InstallsError(ToolverError):
    pass


class VersionNotConfiguredError(ToolverError):
    pass


class VersionNotInstalledError(ToolverError):
    pass
