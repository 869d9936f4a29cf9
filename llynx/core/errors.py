"""Exceptions raised by the llynx core."""


class LlynxError(Exception):
    """Base class for errors reported by llynx."""


class SettingsError(LlynxError):
    """Error reading, parsing or writing an editor settings file."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(message)


class AddonPathError(LlynxError):
    """A library entry cannot be converted to or from an addon identity."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(message)


class NotInstalledError(LlynxError):
    """The requested addon is not present in the installed tree."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"addon '{name}' is not installed")


class StaleEntriesError(LlynxError):
    """The addon is enabled only at versions other than the installed one."""

    def __init__(self, name: str, versions: list[str]):
        self.name = name
        self.versions = versions
        super().__init__(
            f"addon '{name}' is enabled at {', '.join(versions)}, "
            "which does not match the installed version; remove those entries by hand"
        )
