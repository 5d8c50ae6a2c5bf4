"""Per-browser-session state of the reviewer.

The loaded document, its analysis, the chat transcript and the model session
are kept consistent as a group: either nothing has been analyzed, or all of
them belong to the currently loaded document. Every mutation goes through one
of the transition methods below.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, List, Optional
from src.utils.logger import logger
from src.utils.types import AnalysisResult, ChatMessage, UploadedDocument


@dataclass
class AppState:
    api_key: Optional[str] = field(default=None, repr=False)
    document: Optional[UploadedDocument] = None
    result: Optional[AnalysisResult] = None
    messages: List[ChatMessage] = field(default_factory=list)
    session: Any = field(default=None, repr=False)

    @property
    def has_key(self) -> bool:
        return bool(self.api_key)

    @property
    def has_analysis(self) -> bool:
        return self.result is not None

    def set_api_key(self, api_key: str) -> None:
        self.api_key = api_key.strip()

    def forget_api_key(self) -> None:
        self.api_key = None
        self.document = None
        self._reset_analysis()

    def load_document(self, document: UploadedDocument) -> None:
        logger.info("Loaded new document %s; clearing previous analysis", document.name)
        self.document = document
        self._reset_analysis()

    def clear_document(self) -> None:
        self.document = None
        self._reset_analysis()

    def record_analysis(self, result: AnalysisResult, session: Any, seed: ChatMessage) -> None:
        if self.document is None:
            raise RuntimeError("No document loaded")
        self.result = result
        self.session = session
        # New list object so any Conversation bound to the old one is detached.
        self.messages = [seed]

    def _reset_analysis(self) -> None:
        self.result = None
        self.session = None
        self.messages = []
