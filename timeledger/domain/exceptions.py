"""Domain-specific exceptions — framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class InvalidPaginationError(ValueError):
    """Raised for a page number or page size below 1."""

    def __init__(self, page: int, page_size: int):
        self.page = page
        self.page_size = page_size
        super().__init__(
            f"page and page_size must be >= 1 (got page={page}, page_size={page_size})"
        )


class InvalidReportFiltersError(ValueError):
    """Raised when report filters name an impossible year or month."""


class RecordStoreError(Exception):
    """Raised when the record store returns an error or cannot be reached.

    Backend-agnostic — works for the SQL database and the hosted data API.
    """

    def __init__(self, backend: str, message: str, status_code: int | None = None):
        self.backend = backend
        self.status_code = status_code
        self.message = message
        prefix = f"[{backend}] {status_code}: " if status_code is not None else f"[{backend}] "
        super().__init__(f"{prefix}{message}")


class RetrievalFailedError(Exception):
    """Raised when the paginated fetch loop cannot complete."""

    def __init__(self, page: int, cause: Exception):
        self.page = page
        self.cause = cause
        super().__init__(f"Fetching time entries failed on page {page}: {cause}")


class ReportGenerationError(Exception):
    """Raised instead of returning a partial report."""


class RenderFailedError(Exception):
    """Raised when a report document cannot be built or saved."""
