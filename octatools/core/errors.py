"""Exception types raised by the project readers."""


class OctaToolsError(Exception):
    """Base class for OctaTools errors."""


class OtParseError(OctaToolsError):
    """A project or bank file does not have the expected structure."""


class ProjectReadError(OctaToolsError):
    """The primary project file is missing or unreadable."""
