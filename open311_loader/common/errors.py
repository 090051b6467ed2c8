"""Domain errors and failure typing."""


class LoaderError(Exception):
    """Base class for loader failures."""

    error_code = "LOADER_ERROR"


class ConfigError(LoaderError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class FileReadError(LoaderError):
    """Raised when an input file cannot be opened or read."""

    error_code = "FILE_READ_ERROR"


class ParseError(LoaderError):
    """Raised for malformed JSON or records that do not match their schema."""

    error_code = "PARSE_ERROR"


class StoreError(LoaderError):
    """Raised when a DynamoDB call fails."""

    error_code = "STORE_ERROR"

    def __init__(self, message: str, aws_code: str | None = None) -> None:
        super().__init__(message)
        self.aws_code = aws_code


class TableAlreadyExistsError(StoreError):
    error_code = "TABLE_EXISTS"


class TableNotFoundError(StoreError):
    error_code = "TABLE_NOT_FOUND"


class ProvisionError(LoaderError):
    """Raised when a table cannot be created or reused."""

    error_code = "PROVISION_ERROR"


class TableNotReadyError(ProvisionError):
    """Raised while a table is still being created or updated."""

    error_code = "TABLE_NOT_READY"


class ProvisionTimeoutError(ProvisionError):
    error_code = "PROVISION_TIMEOUT"


class BulkLoadError(LoaderError):
    """Raised when a bulk load stops early.

    ``written`` is the number of items stored before the failing record at
    position ``index``.
    """

    error_code = "BULK_LOAD_ERROR"

    def __init__(self, message: str, *, written: int, index: int) -> None:
        super().__init__(message)
        self.written = written
        self.index = index


class SerializationError(BulkLoadError):
    error_code = "SERIALIZATION_ERROR"


class WriteError(BulkLoadError):
    error_code = "WRITE_ERROR"
