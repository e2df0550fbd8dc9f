"""Error types for logic-bits."""


class LogicBitsError(Exception):
    """Base error for logic-bits."""
    pass


class ConfigError(LogicBitsError):
    """Bad or unknown session option, or unusable channel setup."""
    pass


class ProtocolViolation(LogicBitsError):
    """Session used out of order: after End, after close, or with bad input."""
    pass


class CaptureLoadError(LogicBitsError):
    """Failed to open or read a raw capture file."""
    pass
