class SpriteBorderError(Exception):
    """Base error for the sprite border editor."""


class ScanError(SpriteBorderError):
    """Root folder missing or unreadable. Fatal for the whole invocation."""

    def __init__(self, root: str, reason: str):
        super().__init__(f"Cannot scan {root!r}: {reason}")
        self.root = root
        self.reason = reason


class InvalidPatternError(SpriteBorderError):
    """Regex filter failed to compile. Reported as a diagnostic, not raised by the filter engine."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"Invalid regex pattern: {pattern} ({reason})")
        self.pattern = pattern
        self.reason = reason


class MetaFileError(SpriteBorderError):
    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
