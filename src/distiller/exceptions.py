"""Custom exceptions for the distiller pipeline."""


class PipelineError(Exception):
    """Base class for errors that abort a run."""

    stage = "pipeline"

    def __init__(self, message: str, cause: Exception | None = None):
        self.cause = cause
        super().__init__(message)


class ConfigurationError(PipelineError):
    """Raised when the configuration file is missing or invalid."""

    stage = "configuration"

    def __init__(self, reason: str, cause: Exception | None = None):
        self.reason = reason
        super().__init__(f"Invalid configuration: {reason}", cause)


class InputFileError(PipelineError):
    """Raised when the local audio file cannot be found."""

    stage = "input"

    def __init__(self, path: str, cause: Exception | None = None):
        self.path = path
        super().__init__(f"The path {path} does not exist", cause)


class BucketSelectionError(PipelineError):
    """Raised when no usable S3 bucket can be selected."""

    stage = "bucket selection"

    def __init__(self, reason: str, cause: Exception | None = None):
        self.reason = reason
        super().__init__(reason, cause)


class RegionResolutionError(PipelineError):
    """Raised when the region of a bucket cannot be determined."""

    stage = "region resolution"

    def __init__(self, bucket_name: str, cause: Exception | None = None):
        self.bucket_name = bucket_name
        detail = f": {cause}" if cause else ""
        super().__init__(
            f"Failed to resolve region for bucket '{bucket_name}'{detail}", cause
        )


class StorageUploadError(PipelineError):
    """Raised when uploading a file to storage fails."""

    stage = "upload"

    def __init__(self, object_name: str, cause: Exception | None = None):
        self.object_name = object_name
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to upload '{object_name}' to storage{detail}", cause)


class StorageDeleteError(PipelineError):
    """Raised when deleting an object from storage fails."""

    stage = "cleanup"

    def __init__(self, object_name: str, cause: Exception | None = None):
        self.object_name = object_name
        detail = f": {cause}" if cause else ""
        super().__init__(
            f"Failed to delete '{object_name}' from storage{detail}", cause
        )


class TranscriptionError(PipelineError):
    """Raised when a transcription job is rejected or ends in failure."""

    stage = "transcription"

    def __init__(self, job_name: str, reason: str, cause: Exception | None = None):
        self.job_name = job_name
        self.reason = reason
        super().__init__(f"Transcription job '{job_name}' failed: {reason}", cause)


class TranscriptionTimeoutError(TranscriptionError):
    """Raised when a transcription job does not finish within the ceiling."""

    def __init__(self, job_name: str, waited_seconds: float):
        self.waited_seconds = waited_seconds
        super().__init__(
            job_name, f"no terminal state after {waited_seconds:.0f} seconds"
        )


class TranscriptExtractionError(PipelineError):
    """Raised when a finished transcript document cannot be read."""

    stage = "transcription"

    def __init__(self, location: str, reason: str, cause: Exception | None = None):
        self.location = location
        self.reason = reason
        super().__init__(f"Could not extract transcript text: {reason}", cause)


class SummarizationError(PipelineError):
    """Raised when the text-generation call fails."""

    stage = "summarization"

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message, cause)


class OutputWriteError(PipelineError):
    """Raised when a summary file cannot be written."""

    stage = "output"

    def __init__(self, path: str, cause: Exception | None = None):
        self.path = path
        detail = f": {cause}" if cause else ""
        super().__init__(f"Error creating file {path}{detail}", cause)


class TransientServiceError(Exception):
    """Raised for remote failures that are safe to retry."""

    def __init__(self, operation: str, cause: Exception | None = None):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Transient failure during '{operation}'")


class WebhookDeliveryError(Exception):
    """Raised when a webhook POST fails or is answered with a non-2xx status."""

    def __init__(
        self,
        endpoint: str,
        reason: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ):
        self.endpoint = endpoint
        self.reason = reason
        self.status_code = status_code
        self.cause = cause
        super().__init__(f"Webhook delivery failed: {reason}")
