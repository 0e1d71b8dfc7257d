from typing import Optional


class FetchError(Exception):
    """A single source could not be fetched or its payload could not be parsed."""

    def __init__(self, location: str, cause: Optional[BaseException] = None, message: str = ""):
        self.location = location
        self.cause = cause
        detail = message or (f"{type(cause).__name__}: {cause}" if cause is not None else "unknown error")
        super().__init__(f"Failed to fetch {location}: {detail}")
