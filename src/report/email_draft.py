from __future__ import annotations
from typing import Iterable, Optional
from src.utils.types import AnalysisResult

EMPTY_LIST_TEXT = "None identified."

EMAIL_TEMPLATE = """Subject: Contract Review - {document_name} - {org_name} Findings

Dear Vendor Team,

Thank you for providing the draft agreement. We have completed our initial review against {org_name}'s standard supply chain terms.

While much of the agreement looks acceptable, we have identified specific areas where the terms deviate from our required standards (Net 30 payment, FOB Destination, Cyber Liability Limits, etc.) or require clarification.

EXECUTIVE SUMMARY:
{summary}

CRITICAL ITEMS FOR RESOLUTION (Red Flags):
{red_flags}

STANDARD TERMS ALIGNMENT NEEDED:
{inconsistencies}

Please review these points and let us know if you can update the draft to align with our standard requirements.

Best regards,

{org_name} Supply Chain Team"""


def _bullets(items: Iterable[str]) -> str:
    lines = [f"• {i}" for i in items]
    return "\n".join(lines) if lines else EMPTY_LIST_TEXT


def build_email_draft(result: Optional[AnalysisResult], document_name: Optional[str], org_name: str = "Health Future") -> str:
    """Negotiation email built from the current findings; empty when there is no analysis."""
    if result is None:
        return ""
    return EMAIL_TEMPLATE.format(
        document_name=document_name or "Agreement",
        org_name=org_name,
        summary=result.summary,
        red_flags=_bullets(result.red_flags),
        inconsistencies=_bullets(result.inconsistencies),
    )
