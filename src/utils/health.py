"""Readiness check for the contract reviewer.

Confirms Streamlit, the Gemini SDK and python-dotenv import, and that the
standard terms, system prompt and analysis request templates load and render
into a first review message. No API key is needed and nothing is sent to Gemini.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Any, List


@dataclass
class HealthStatus:
    component: str
    ok: bool
    detail: str

    def as_dict(self) -> Dict[str, Any]:
        return {"component": self.component, "ok": self.ok, "detail": self.detail}


def _check_import(module: str) -> HealthStatus:
    try:
        __import__(module)
        return HealthStatus(module, True, "import ok")
    except Exception as e:  # pragma: no cover - diagnostic path
        return HealthStatus(module, False, f"import failed: {e}")


CORE_IMPORTS = [
    "streamlit",
    "google.generativeai",
    "dotenv",
]


def _check_prompts() -> HealthStatus:
    try:
        from src.analysis.contract_review import build_analysis_message
        from src.utils.config import AppConfig
        from src.utils.types import DocumentPart

        parts = build_analysis_message(AppConfig(), DocumentPart(data="", mime_type="text/plain"))
        if not all(isinstance(p, str) and p for p in (parts[0], parts[2])):
            return HealthStatus("prompts", False, "prompt text empty")
        return HealthStatus("prompts", True, "prompts ok")
    except Exception as e:  # pragma: no cover - rare path
        return HealthStatus("prompts", False, f"prompt load failed: {e}")


def run_health_check() -> Dict[str, Any]:
    results: List[HealthStatus] = [_check_import(mod) for mod in CORE_IMPORTS]
    results.append(_check_prompts())
    return {
        "ok": all(r.ok for r in results),
        "components": [r.as_dict() for r in results],
    }


if __name__ == "__main__":  # Manual invocation helper
    import json, sys
    report = run_health_check()
    print(json.dumps(report, indent=2))
    sys.exit(0 if report["ok"] else 1)
