"""Error types raised by the contract review pipeline.

The UI layer catches these and turns them into notifications; none of them is
fatal to the running app.
"""
from __future__ import annotations


class ContractReviewError(Exception):
    """Base class for every error the app surfaces to the user."""


class DocumentError(ContractReviewError):
    pass


class UnsupportedFileTypeError(DocumentError):
    def __init__(self, name: str, media_type: str | None):
        self.name = name
        self.media_type = media_type
        super().__init__(f"Unsupported file '{name}' ({media_type or 'unknown type'}). Please upload a PDF or Text file.")


class EmptyDocumentError(DocumentError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"'{name}' is empty.")


class DocumentTooLargeError(DocumentError):
    def __init__(self, name: str, size: int, limit: int):
        self.name = name
        self.size = size
        self.limit = limit
        super().__init__(f"'{name}' is {size / 1024 / 1024:.2f} MB; the limit is {limit / 1024 / 1024:.0f} MB.")


class CredentialError(ContractReviewError):
    pass


class AnalysisError(ContractReviewError):
    pass


class ResponseParseError(AnalysisError):
    """The model's first reply could not be decoded into an analysis."""

    def __init__(self, message: str, raw: str = ""):
        self.raw = raw
        super().__init__(message)


class ChatUnavailableError(ContractReviewError):
    pass
