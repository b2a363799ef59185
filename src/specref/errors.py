from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    PAGE_NOT_FOUND = "PAGE_NOT_FOUND"
    PAGE_FETCH_FAILED = "PAGE_FETCH_FAILED"
    INDEX_NOT_FOUND = "INDEX_NOT_FOUND"
    INDEX_INVALID = "INDEX_INVALID"
    FILE_READ_FAILED = "FILE_READ_FAILED"
    FILE_WRITE_FAILED = "FILE_WRITE_FAILED"


class SpecRefError(Exception):
    """Raised for all expected failure conditions.

    Fetch failures are caught by ``LiveSpecFetcher`` and collapse into a
    ``None`` result for the affected spec. Everything else propagates to
    the CLI, which logs it and exits non-zero.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: str,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.recoverable = recoverable

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "suggestion": self.suggestion,
                "recoverable": self.recoverable,
            }
        }
