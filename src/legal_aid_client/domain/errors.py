"""Error types shared by adapters and view-models."""


class RemoteCallError(RuntimeError):
    """A call to the hosted backend failed or returned nothing usable."""


class RowDecodeError(RemoteCallError):
    """A row returned by the data API does not match the expected schema."""

    def __init__(self, table: str, row: object, reason: str) -> None:
        super().__init__(f"Cannot decode row from {table}: {reason}")
        self.table = table
        self.row = row


class AuthenticationError(RuntimeError):
    """An identity provider operation failed; the message is user-facing."""
