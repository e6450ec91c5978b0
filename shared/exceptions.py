"""Exception types shared by the ingestion worker and the API."""


class IngestError(Exception):
    """Base error carrying an HTTP status code and machine-readable code."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AdapterFailure(IngestError):
    """Network or parse failure while fetching a source."""

    code = "ADAPTER_FAILURE"


class ConfigurationError(AdapterFailure):
    """Source requires integration work before it can be fetched."""

    code = "CONFIGURATION_ERROR"


class ArticleProcessingError(IngestError):
    """Failure classifying or persisting a single raw article."""

    code = "ARTICLE_PROCESSING_ERROR"

    def __init__(self, title: str, reason: str):
        super().__init__(f'Article "{title}": {reason}')
        self.title = title
        self.reason = reason


class NotFoundError(IngestError):
    status_code = 404
    code = "NOT_FOUND"
