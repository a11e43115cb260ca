class ExtractionError(Exception):
    """Base class for every failure a parsing stage can report."""


class NoCredential(ExtractionError):
    pass


class RemoteCallFailed(ExtractionError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AuthenticationFailed(RemoteCallFailed):
    pass


class UnparseableResponse(ExtractionError):
    pass


class AmountNotFound(ExtractionError):
    pass
