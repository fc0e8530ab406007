class DataProcessingError(Exception):
    """Raised when something goes wrong in a processing pipeline."""
    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ReportIntegrityError(DataProcessingError):
    """Raised when reports and the location catalog don't line up (empty catalog, unknown location)."""


class PayloadValidationError(DataProcessingError):
    """Raised when a submitted payload can't be read at all (e.g. missing or invalid dates)."""
