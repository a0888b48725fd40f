"""Domain models for the file -> streaming ingestion loader."""

from .config_models import LoaderConfig
from .error_record import ErrorRecord
from .processing_result import ConfirmationResult, ConfirmationStatus, SubmissionResult
from .row_data import RowData

__all__ = [
    # Configuration models
    "LoaderConfig",
    # Processing models
    "RowData",
    "ErrorRecord",
    "SubmissionResult",
    "ConfirmationStatus",
    "ConfirmationResult",
]
