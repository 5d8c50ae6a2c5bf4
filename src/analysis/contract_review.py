from __future__ import annotations
import json
import re
from pathlib import Path
from typing import Any, List, Tuple
from src.utils.config import AppConfig
from src.utils.exception import AnalysisError, ResponseParseError
from src.utils.logger import logger
from src.utils.types import AnalysisResult, DocumentPart, UploadedDocument
from src.ingest.document_loader import encode_document

PROMPT_DIR = Path(__file__).resolve().parent.parent / "prompts"

def _read_prompt(name: str) -> str:
    with open(PROMPT_DIR / name, "r", encoding="utf-8") as f:
        return f.read().strip()

STANDARD_TERMS_TEMPLATE = _read_prompt("standard_terms.txt")
SYSTEM_PROMPT_TEMPLATE = _read_prompt("system_prompt.txt")
ANALYSIS_REQUEST_TEMPLATE = _read_prompt("analysis_request.txt")
CHECKLIST = [line for line in _read_prompt("checklist.txt").splitlines() if line.strip()]

REQUIRED_KEYS = ("summary", "inconsistencies", "redFlags", "overallScore")
FENCE_RE = re.compile(r"```(?:json)?", re.I)


def standard_terms(config: AppConfig) -> str:
    return STANDARD_TERMS_TEMPLATE.format(org_name=config.org_name)


def system_prompt(config: AppConfig) -> str:
    return SYSTEM_PROMPT_TEMPLATE.format(org_name=config.org_name)


def build_analysis_message(config: AppConfig, part: DocumentPart) -> List[Any]:
    """First message of a review: instructions, the contract, then the comparison request."""
    request = ANALYSIS_REQUEST_TEMPLATE.format(org_name=config.org_name, standard_terms=standard_terms(config))
    return [system_prompt(config), part, request]


def strip_code_fences(text: str) -> str:
    return FENCE_RE.sub("", text or "").strip()


def _string_list(payload: dict, key: str, raw: str) -> Tuple[str, ...]:
    value = payload[key]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ResponseParseError(f"'{key}' must be a list of strings", raw)
    return tuple(v.strip() for v in value)


def _score(value: Any, raw: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ResponseParseError("'overallScore' must be a number", raw)
    if isinstance(value, float):
        if not value.is_integer():
            raise ResponseParseError("'overallScore' must be an integer", raw)
        value = int(value)
    if not 1 <= value <= 100:
        raise ResponseParseError(f"'overallScore' {value} is outside 1-100", raw)
    return value


def _decode_json(raw: str) -> Any:
    body = strip_code_fences(raw)
    try:
        return json.loads(body)
    except json.JSONDecodeError:
        # Model occasionally wraps the object in prose.
        start, end = body.find("{"), body.rfind("}")
        if start == -1 or end <= start:
            raise ResponseParseError("Reply does not contain a JSON object", raw)
        try:
            return json.loads(body[start:end + 1])
        except json.JSONDecodeError as e:
            raise ResponseParseError(f"Reply is not valid JSON: {e}", raw) from e


def parse_analysis(raw: str) -> AnalysisResult:
    """Decode the model's first reply into an AnalysisResult.

    All four keys are required; a reply missing any of them is rejected as a
    whole rather than filled with defaults.
    """
    payload = _decode_json(raw)
    if not isinstance(payload, dict):
        raise ResponseParseError("Reply JSON is not an object", raw)
    missing = [k for k in REQUIRED_KEYS if k not in payload]
    if missing:
        raise ResponseParseError(f"Reply is missing keys: {', '.join(missing)}", raw)
    summary = payload["summary"]
    if not isinstance(summary, str) or not summary.strip():
        raise ResponseParseError("'summary' must be a non-empty string", raw)
    return AnalysisResult(
        summary=summary.strip(),
        inconsistencies=_string_list(payload, "inconsistencies", raw),
        red_flags=_string_list(payload, "redFlags", raw),
        overall_score=_score(payload["overallScore"], raw),
    )


def run_analysis(client, document: UploadedDocument, config: AppConfig):
    """Send the contract on a fresh session and decode the findings.

    Returns (AnalysisResult, session). Any failure along the way comes back as
    AnalysisError so callers have a single thing to catch.
    """
    try:
        part = encode_document(document)
        session = client.start_session()
        raw = session.send(build_analysis_message(config, part))
        result = parse_analysis(raw)
    except ResponseParseError as e:
        logger.error("Unparseable analysis reply for %s: %s", document.name, e)
        raise
    except Exception as e:
        logger.exception("Analysis request failed for %s", document.name)
        raise AnalysisError(f"Failed to analyze the contract: {e}") from e
    logger.info(
        "Analyzed %s: score=%d inconsistencies=%d red_flags=%d",
        document.name, result.overall_score, len(result.inconsistencies), len(result.red_flags),
    )
    return result, session


def seed_message(document_name: str, result: AnalysisResult, config: AppConfig) -> str:
    return (
        f"I've analyzed {document_name} against the {config.org_name} standards. "
        f"I found {len(result.inconsistencies)} inconsistencies and {len(result.red_flags)} red flags."
    )
