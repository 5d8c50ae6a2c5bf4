from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Any, Tuple

@dataclass(frozen=True)
class UploadedDocument:
    name: str
    mime_type: str
    data: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.data)

@dataclass(frozen=True)
class DocumentPart:
    data: str  # base64 text of the document bytes
    mime_type: str

@dataclass(frozen=True)
class AnalysisResult:
    summary: str
    inconsistencies: Tuple[str, ...]
    red_flags: Tuple[str, ...]
    overall_score: int

    def as_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary,
            "inconsistencies": list(self.inconsistencies),
            "redFlags": list(self.red_flags),
            "overallScore": self.overall_score,
        }

class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"

class MessageStatus(str, Enum):
    PENDING = "pending"
    DELIVERED = "delivered"
    FAILED = "failed"

@dataclass
class ChatMessage:
    role: Role
    text: str
    status: MessageStatus = MessageStatus.DELIVERED

    def as_dict(self) -> Dict[str, Any]:
        return {"role": self.role.value, "text": self.text, "status": self.status.value}

Transcript = List[ChatMessage]
