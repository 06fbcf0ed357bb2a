from __future__ import annotations


class ConversionError(RuntimeError):
    code = "CONVERSION"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code


class InputError(ConversionError):
    """Raised when a location is missing or cannot be interpreted."""

    code = "INPUT"


class ResourceIOError(ConversionError):
    """Raised when a local file cannot be read or written."""

    code = "IO"


class NetworkError(ConversionError):
    """Raised when a remote resource cannot be fetched."""

    code = "NETWORK"


class ConversionTimeout(ConversionError):
    code = "TIMEOUT"


class ScriptEngineUnavailable(ConversionError):
    """Raised when script execution is requested but no engine can run."""

    code = "SCRIPT_ENGINE"


__all__ = [
    "ConversionError",
    "ConversionTimeout",
    "InputError",
    "NetworkError",
    "ResourceIOError",
    "ScriptEngineUnavailable",
]
