from __future__ import annotations
import html
import streamlit as st
from typing import Iterable, Union
from src.analysis.contract_review import CHECKLIST
from src.session.controller import ReviewController
from src.utils.config import AppConfig
from src.utils.exception import ContractReviewError
from src.utils.logger import logger
from src.utils.types import ChatMessage, MessageStatus, Role

PRIMARY_COLOR = "#2563EB"  # blue-600
BAND_COLORS = {
    "success": ("#D1FAE5", "#047857"),
    "warning": ("#FEF3C7", "#B45309"),
    "danger": ("#FEE2E2", "#B91C1C"),
    "info": ("#FFFFFF", "#334155"),
}
CARD_ICONS = {"danger": "🛡️", "warning": "⚠️", "success": "✅", "info": "📄"}
COMPLIANCE_TEXT = "The remaining terms appear to align with standard healthcare supply chain provisions."

_CSS_TEMPLATE = r"""
<style>
html, body, [class*="css"]  { font-family: 'Inter', 'Segoe UI', sans-serif; }
section.main > div { padding-top: 1rem; }
.brand { display:flex; align-items:center; gap:.6rem; margin-bottom:.4rem; }
.brand-badge { width:38px; height:38px; display:flex; align-items:center; justify-content:center; background:__PRIMARY__; color:#fff; font-weight:700; border-radius:10px; }
.brand h1 { font-size:1.35rem; margin:0; }
.brand h1 span { color:#60A5FA; }
.brand p { font-size:.7rem; margin:0; opacity:.6; }
.score-badge { display:inline-block; padding:2px 8px; border-radius:6px; font-weight:700; font-size:.75rem; margin-top:4px; }
.review-card { border:1px solid #E2E8F0; border-radius:10px; padding:.65rem .85rem; margin-bottom:.6rem; font-size:.8rem; line-height:1.35; color:#334155; }
.review-card ul { margin:.3rem 0 0 1rem; padding:0; }
.chat-user { background:__PRIMARY__; color:#fff; padding:10px 14px; border-radius:14px 0 14px 14px; margin:0 0 6px 20%; white-space:pre-wrap; }
.chat-ai { background:#FFFFFF; color:#1E293B; border:1px solid #E2E8F0; padding:10px 14px; border-radius:0 14px 14px 14px; margin:0 20% 6px 0; white-space:pre-wrap; }
.chat-failed { opacity:.6; }
.chat-pending { opacity:.8; font-style:italic; }
.checklist { font-size:.7rem; background:#F8FAFC; border:1px solid #F1F5F9; border-radius:6px; padding:.6rem .9rem; }
.legal-footer { text-align:center; padding:.5rem 0 1.5rem 0; font-size:.65rem; opacity:.55; }
</style>
"""

GLOBAL_CSS = _CSS_TEMPLATE.replace("__PRIMARY__", PRIMARY_COLOR)


def score_band(score: int) -> str:
    if score > 80:
        return "success"
    if score > 50:
        return "warning"
    return "danger"


def score_badge_html(score: int) -> str:
    bg, fg = BAND_COLORS[score_band(score)]
    return f"<span class='score-badge' style='background:{bg};color:{fg};'>Score: {score}/100</span>"


def card_html(title: str, items: Union[str, Iterable[str]], kind: str = "info") -> str:
    bg, fg = BAND_COLORS.get(kind, BAND_COLORS["info"])
    if isinstance(items, str):
        body = f"<p style='margin:.3rem 0 0 0;'>{html.escape(items)}</p>"
    else:
        body = "<ul>" + "".join(f"<li>{html.escape(i)}</li>" for i in items) + "</ul>"
    return (
        f"<div class='review-card' style='background:{bg};'>"
        f"<strong style='color:{fg};'>{CARD_ICONS.get(kind, '')} {html.escape(title)}</strong>{body}</div>"
    )


def message_html(msg: ChatMessage) -> str:
    css = "chat-user" if msg.role == Role.USER else "chat-ai"
    if msg.status == MessageStatus.FAILED:
        css += " chat-failed"
    elif msg.status == MessageStatus.PENDING:
        css += " chat-pending"
    return f"<div class='{css}'>{html.escape(msg.text)}</div>"


def header(config: AppConfig):
    st.markdown(GLOBAL_CSS, unsafe_allow_html=True)
    st.markdown(
        "<div class='brand'><div class='brand-badge'>SG</div><div>"
        "<h1>SupplyChain<span>Guard</span></h1>"
        f"<p>{html.escape(config.org_name)} • AI Contract Reviewer</p></div></div>",
        unsafe_allow_html=True,
    )


def credential_gate(controller: ReviewController) -> bool:
    """Block the page until an API key is entered. Returns True once one is held."""
    if controller.state.has_key:
        return True
    st.markdown("### Enter Gemini API Key")
    st.write("To analyze contracts, we need a Gemini API key. The key is kept only in this browser session's memory.")
    with st.form("api_key_form"):
        key = st.text_input("API key", type="password", placeholder="Paste your API key here...")
        submitted = st.form_submit_button("Start Analyzing", type="primary", use_container_width=True)
    if submitted:
        try:
            controller.submit_api_key(key)
            st.rerun()
        except ContractReviewError as e:
            st.error(str(e))
    return False


def sidebar(controller: ReviewController):
    state = controller.state
    st.sidebar.markdown("**Session**")
    st.sidebar.caption(f"Model: {controller.config.model_name}")
    st.sidebar.caption(f"Document: {state.document.name if state.document else '—'}")
    if state.has_analysis:
        st.sidebar.caption(f"Chat messages: {len(state.messages)}")
    if st.sidebar.button("Forget API key", use_container_width=True):
        controller.forget_api_key()
        st.session_state.uploader_nonce = st.session_state.get("uploader_nonce", 0) + 1
        st.rerun()
    st.sidebar.markdown("<div style='font-size:.6rem;opacity:.6;'>Secure Environment • No Patient Data</div>", unsafe_allow_html=True)


def upload_panel(controller: ReviewController):
    state = controller.state
    nonce = st.session_state.get("uploader_nonce", 0)
    uploaded = st.file_uploader(
        "Upload Contract",
        type=["pdf", "txt"],
        key=f"contract_upload_{nonce}",
        help="Drag a PDF or text file here or click to browse.",
    )
    if uploaded is not None:
        marker = getattr(uploaded, "file_id", None) or f"{uploaded.name}:{uploaded.size}"
        if marker != st.session_state.get("last_upload_marker"):
            st.session_state.last_upload_marker = marker
            try:
                controller.upload(uploaded)
            except ContractReviewError as e:
                st.error(str(e))
    if state.document is None:
        return
    st.caption(f"📎 {state.document.name} — {state.document.size / 1024 / 1024:.2f} MB")
    cols = st.columns([1, 1])
    with cols[0]:
        if st.button("Remove", use_container_width=True):
            controller.remove_document()
            st.session_state.uploader_nonce = nonce + 1
            st.session_state.last_upload_marker = None
            st.rerun()
    with cols[1]:
        if not state.has_analysis and st.button("Run Analysis", type="primary", use_container_width=True):
            with st.spinner("Analyzing..."):
                try:
                    controller.analyze()
                except ContractReviewError as e:
                    logger.warning("Analysis not completed: %s", e)
                    st.error("Failed to analyze the contract. Please check the logs for details or try again.")
                    st.caption(str(e))
                else:
                    st.rerun()


def analysis_panel(controller: ReviewController):
    result = controller.state.result
    if result is None:
        st.info(f"Upload a contract to see analysis against {controller.config.org_name} standards.")
        items = "".join(f"<li>{html.escape(i)}</li>" for i in CHECKLIST)
        st.markdown(f"<div class='checklist'><strong>Checking against:</strong><ul>{items}</ul></div>", unsafe_allow_html=True)
        return
    head, action = st.columns([2, 1])
    with head:
        st.markdown("#### Analysis Report")
        st.markdown(score_badge_html(result.overall_score), unsafe_allow_html=True)
    with action:
        show_email = st.toggle("✉️ Draft Email", key="show_email")
    st.markdown(card_html("Executive Summary", result.summary, "info"), unsafe_allow_html=True)
    if result.red_flags:
        st.markdown(card_html(f"Red Flags ({len(result.red_flags)})", result.red_flags, "danger"), unsafe_allow_html=True)
    if result.inconsistencies:
        st.markdown(card_html(f"Standard Deviations ({len(result.inconsistencies)})", result.inconsistencies, "warning"), unsafe_allow_html=True)
    st.markdown(card_html("Standard Terms Compliance", COMPLIANCE_TEXT, "success"), unsafe_allow_html=True)
    if show_email:
        email_panel(controller)
    st.download_button(
        "🗂️ Export JSON", data=controller.export_json(), file_name="contract_review.json",
        mime="application/json", use_container_width=True,
    )


def email_panel(controller: ReviewController):
    draft = controller.email_draft()
    st.markdown("##### Negotiation Email Draft")
    st.caption("Preview: use the copy icon in the corner to copy to clipboard.")
    st.code(draft, language=None, wrap_lines=True)
    st.download_button("Download .txt", data=draft, file_name="negotiation_email.txt", mime="text/plain")


def chat_panel(controller: ReviewController):
    messages = controller.state.messages
    if not messages:
        st.markdown("#### 💬 Contract Assistant")
        st.caption("Ask specific questions about clauses, dates, or penalties.")
    for msg in messages:
        st.markdown(message_html(msg), unsafe_allow_html=True)
    pending_slot = st.container()
    enabled = controller.can_chat
    with st.form("chat_form", clear_on_submit=True):
        text = st.text_input(
            "Message",
            placeholder="Ask a question about this contract..." if enabled else "Upload a contract to start chatting...",
            disabled=not enabled,
            label_visibility="collapsed",
        )
        submitted = st.form_submit_button("Send", disabled=not enabled, use_container_width=True)
    if submitted and text.strip():
        try:
            user_msg = controller.post_message(text)
        except ContractReviewError as e:
            st.warning(str(e))
        else:
            with pending_slot:
                st.markdown(message_html(user_msg), unsafe_allow_html=True)
                with st.spinner("Thinking..."):
                    controller.deliver_message(user_msg)
            st.rerun()
    st.markdown("<div class='legal-footer'>AI can make mistakes. Verify important terms with Legal Counsel.</div>", unsafe_allow_html=True)
