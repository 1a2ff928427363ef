"""Error kinds raised by the quiz generation pipeline.

Each error carries the HTTP status the API layer answers with, a short
human-readable message and optional diagnostic details (parser messages,
remote status, a truncated raw model reply).
"""

from typing import Optional


class QuizMeError(Exception):
    status_code: int = 500
    code: str = "QUIZ_ERROR"

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


# Request / document problems

class InvalidParameters(QuizMeError):
    status_code = 400
    code = "INVALID_PARAMETERS"


class MissingDocument(QuizMeError):
    status_code = 400
    code = "MISSING_DOCUMENT"


class FileTooLarge(QuizMeError):
    status_code = 400
    code = "FILE_TOO_LARGE"


class UnsupportedFormat(QuizMeError):
    status_code = 400
    code = "UNSUPPORTED_FORMAT"


class ExtractionFailure(QuizMeError):
    status_code = 400
    code = "EXTRACTION_FAILED"


class InsufficientText(QuizMeError):
    status_code = 400
    code = "INSUFFICIENT_TEXT"


# Completion service

class MissingCredential(QuizMeError):
    code = "MISSING_CREDENTIAL"


class InvalidCredential(QuizMeError):
    code = "INVALID_CREDENTIAL"


class Unauthorized(QuizMeError):
    status_code = 401
    code = "UNAUTHORIZED"


class QuotaExceeded(QuizMeError):
    status_code = 402
    code = "QUOTA_EXCEEDED"


class RateLimited(QuizMeError):
    status_code = 429
    code = "RATE_LIMITED"


class CompletionTimeout(QuizMeError):
    code = "TIMEOUT"


class RemoteFailure(QuizMeError):
    code = "REMOTE_FAILURE"

    def __init__(self, message: str, details: Optional[str] = None, status: Optional[int] = None):
        super().__init__(message, details)
        self.status = status


# Model output

class UnparsableResponse(QuizMeError):
    status_code = 400
    code = "UNPARSABLE_RESPONSE"


class InvalidQuizStructure(QuizMeError):
    status_code = 400
    code = "INVALID_QUIZ_STRUCTURE"
