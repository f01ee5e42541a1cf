class ArchiveError(Exception):
    """Base exception for archive lookup failures."""

    kind = "error"


class ArchiveTransportError(ArchiveError):
    """Raised when archive.org could not be reached."""

    kind = "transport"


class ArchiveStatusError(ArchiveError):
    """Raised when archive.org replies with a non-success status."""

    kind = "status"

    def __init__(self, status: int, reason: str | None = None) -> None:
        self.status = status
        self.reason = reason or ""
        super().__init__(f"archive.org replied with status {status} {self.reason}")


class ArchiveUnavailableError(ArchiveError):
    """Raised when archive.org has no usable snapshot for a URL."""

    kind = "unavailable"

    def __init__(self, message: str = "That URL is not available via the internet archive API.") -> None:
        super().__init__(message)


class ArchiveResponseError(ArchiveError):
    """Raised when the archive.org response body cannot be understood."""

    kind = "malformed"

    def __init__(self, body: str) -> None:
        self.body = body
        super().__init__(f"Error occurred processing archive.org response:\n{body}")
