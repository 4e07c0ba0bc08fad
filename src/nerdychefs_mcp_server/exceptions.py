"""Exceptions raised by the prompt catalog and its data source."""


class CatalogError(Exception):
    """Base exception for prompt catalog operations."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DataSourceError(CatalogError):
    """
    Raised when a document cannot be obtained from the NerdyChefs API.

    The document cache recovers from these by serving a stale copy when one
    exists.
    """

    def __init__(self, document: str, message: str) -> None:
        self.document = document
        super().__init__(message)


class TransportError(DataSourceError):
    """Raised on connection failures, timeouts and non-2xx responses."""

    def __init__(
        self,
        document: str,
        message: str,
        status_code: int | None = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(document, message)


class ParseError(DataSourceError):
    """Raised when the API returns a body that is not a valid document."""


class NotFoundError(CatalogError):
    """Raised when a direct lookup (prompt id, pack title, category id) matches nothing."""


class ValidationError(CatalogError):
    """Raised when a required argument is missing from a direct lookup."""

    def __init__(self, parameter: str) -> None:
        self.parameter = parameter
        super().__init__(f"Missing required parameter: {parameter}")
