"""Custom exception classes for nescapture."""


class NESCaptureError(Exception):
    """Base exception for nescapture."""

    pass


class InvalidInputError(NESCaptureError):
    """Exception raised for bad arguments, missing files or wrong extensions."""

    pass


class ConfigurationError(NESCaptureError):
    """Exception raised for configuration errors."""

    pass


class DisplayError(NESCaptureError):
    """Exception raised when the virtual display cannot be brought up."""

    pass


class WindowNotFoundError(NESCaptureError):
    """Exception raised when the emulator window cannot be located."""

    pass


class GeometryParseError(NESCaptureError):
    """Exception raised when window geometry output cannot be parsed."""

    pass


class ToolError(NESCaptureError):
    """Exception raised when an external tool cannot be run or fails."""

    pass


class CaptureToolError(ToolError):
    """Exception raised when a capture or encode step produced no output."""

    pass


class CaptureTimeoutError(NESCaptureError):
    """Exception raised when a capture run exceeds its outer time bound."""

    pass


class InputInjectionError(NESCaptureError):
    """Exception raised when an input script or key sequence fails."""

    pass
