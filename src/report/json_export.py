from __future__ import annotations
import json
from typing import Any, Dict, Optional
from src.utils.types import AnalysisResult, Transcript, UploadedDocument

def build_analysis_json(
    document: Optional[UploadedDocument],
    result: Optional[AnalysisResult],
    transcript: Transcript,
    meta: Dict[str, Any],
) -> str:
    """Return a JSON snapshot of the current review for record keeping.

    meta can include app version, model name, organization, etc.
    """
    payload = {
        "meta": meta,
        "document": (
            {"name": document.name, "mime_type": document.mime_type, "size_bytes": document.size}
            if document else None
        ),
        "analysis": result.as_dict() if result else None,
        "chat": [m.as_dict() for m in transcript],
    }
    return json.dumps(payload, ensure_ascii=False, indent=2)
