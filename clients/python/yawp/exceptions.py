"""yawp client exceptions."""


class YawpError(Exception):
    """Base exception for yawp client errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingIdentifierError(YawpError):
    """An object was used where an identifier was required but has none."""

    def __init__(self, message: str | None = None):
        super().__init__(
            message
            or "object has no 'id'; address the endpoint explicitly if it does not use an 'id' field"
        )


class CardinalityError(YawpError):
    """An "exactly one" query returned zero or more than one result."""

    def __init__(self, count: int):
        super().__init__(f"called only() but got {count} results")
        self.count = count
