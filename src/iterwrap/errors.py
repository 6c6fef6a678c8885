"""Error types raised while building iterating wrappers."""


class IterwrapError(Exception):
    """Base class for all iterwrap errors."""


class DescriptorError(IterwrapError):
    """Raised when a subject type cannot be described.

    Covers a missing or unbound target type parameter, classes that cannot be
    imported from module scope, and signatures that cannot be reproduced.
    """

    def __init__(self, subject: str, reason: str) -> None:
        self.subject = subject
        self.reason = reason
        super().__init__(f"Cannot describe {subject}: {reason}")


class EmissionError(IterwrapError):
    """Raised when a descriptor is structurally incomplete (developer error)."""

    def __init__(self, subject: str, reason: str, method: str | None = None) -> None:
        self.subject = subject
        self.reason = reason
        self.method = method

        location = f"{subject}.{method}" if method else subject
        super().__init__(f"Cannot emit wrapper for {location}: {reason}")
