"""Error type for the Notion publisher."""

from __future__ import annotations


class NotionError(Exception):
    """Wraps Notion API failures with the operation that was attempted."""

    def __init__(
        self,
        operation: str,
        cause: Exception | str,
        retryable: bool = False,
        status: int | None = None,
    ) -> None:
        self.operation = operation
        self.retryable = retryable
        self.status = status
        super().__init__(f"notion {operation} failed: {cause}")
        if isinstance(cause, Exception):
            self.__cause__ = cause
