import json
import pytest
from src.session.app_state import AppState
from src.session.controller import ReviewController
from src.chat.conversation import APOLOGY_TEXT
from src.utils.config import AppConfig
from src.utils.exception import AnalysisError, ChatUnavailableError, CredentialError, UnsupportedFileTypeError
from src.utils.types import MessageStatus, Role

REPLY = json.dumps({
    "summary": "Deal looks standard.",
    "inconsistencies": ["Net 45 vs required Net 30"],
    "redFlags": ["Cyber liability $5M < $10M minimum"],
    "overallScore": 62,
})


class FakeUpload:
    def __init__(self, name, type, data=b"contract body"):
        self.name = name
        self.type = type
        self._data = data

    def getvalue(self):
        return self._data


class ScriptedSession:
    def __init__(self, replies):
        self.replies = list(replies)
        self.sent = []

    def send(self, parts):
        self.sent.append(parts)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeClientFactory:
    """Stands in for GeminiClient; records every session handed out."""

    def __init__(self, *scripts):
        self.scripts = list(scripts)
        self.sessions = []
        self.keys = []

    def __call__(self, config, api_key):
        self.keys.append(api_key)
        return self

    def start_session(self):
        session = ScriptedSession(self.scripts.pop(0))
        self.sessions.append(session)
        return session


def make_controller(*scripts):
    factory = FakeClientFactory(*scripts)
    controller = ReviewController(AppConfig(), AppState(), client_factory=factory)
    controller.submit_api_key("  test-key ")
    return controller, factory


def test_blank_api_key_rejected():
    controller = ReviewController(AppConfig(), AppState(), client_factory=FakeClientFactory())
    with pytest.raises(CredentialError):
        controller.submit_api_key("   ")
    assert not controller.state.has_key


def test_contract_pdf_scenario():
    controller, factory = make_controller([REPLY])
    controller.upload(FakeUpload("contract.pdf", "application/pdf"))
    result = controller.analyze()
    assert factory.keys == ["test-key"]
    assert result.overall_score == 62
    assert len(result.red_flags) == 1 and len(result.inconsistencies) == 1
    state = controller.state
    assert len(state.messages) == 1
    assert state.messages[0].role == Role.ASSISTANT
    assert "1 inconsistencies and 1 red flags" in state.messages[0].text
    assert controller.can_chat


def test_docx_rejected_without_state_change_or_network():
    controller, factory = make_controller()
    with pytest.raises(UnsupportedFileTypeError):
        controller.upload(FakeUpload("contract.docx", "application/vnd.openxmlformats-officedocument.wordprocessingml.document"))
    assert controller.state.document is None
    assert factory.keys == [] and factory.sessions == []


def test_failed_analysis_leaves_state_unchanged():
    controller, factory = make_controller(['{"summary": "x"}'])
    controller.upload(FakeUpload("contract.pdf", "application/pdf"))
    with pytest.raises(AnalysisError):
        controller.analyze()
    state = controller.state
    assert state.result is None and state.session is None and state.messages == []
    assert not controller.can_chat


def test_retry_after_failure_uses_fresh_session():
    controller, factory = make_controller([ConnectionError("offline")], [REPLY])
    controller.upload(FakeUpload("contract.pdf", "application/pdf"))
    with pytest.raises(AnalysisError):
        controller.analyze()
    controller.analyze()
    assert len(factory.sessions) == 2
    assert controller.state.session is factory.sessions[1]


def test_analyze_is_not_repeated_once_result_exists():
    controller, factory = make_controller([REPLY])
    controller.upload(FakeUpload("contract.pdf", "application/pdf"))
    first = controller.analyze()
    assert controller.analyze() is first
    assert len(factory.sessions) == 1


def test_chat_goes_through_analysis_session():
    controller, factory = make_controller([REPLY, "Net 45.", "Vendor."])
    controller.upload(FakeUpload("contract.pdf", "application/pdf"))
    controller.analyze()
    controller.ask("Payment terms?")
    controller.ask("Who pays freight?")
    assert len(controller.state.messages) == 5
    assert factory.sessions[0].sent[1:] == ["Payment terms?", "Who pays freight?"]


def test_chat_failure_scenario():
    controller, _ = make_controller([REPLY, RuntimeError("boom"), "Yes."])
    controller.upload(FakeUpload("contract.pdf", "application/pdf"))
    controller.analyze()
    controller.ask("Auto-renewal?")
    msgs = controller.state.messages
    assert [m.role for m in msgs[1:]] == [Role.USER, Role.ASSISTANT]
    assert msgs[-1].text == APOLOGY_TEXT
    controller.ask("Auto-renewal?")
    assert controller.state.messages[-1].text == "Yes."


def test_chat_disabled_before_analysis():
    controller, _ = make_controller()
    with pytest.raises(ChatUnavailableError):
        controller.ask("hello")


def test_new_document_resets_everything():
    controller, _ = make_controller([REPLY, "answer"])
    controller.upload(FakeUpload("contract.pdf", "application/pdf"))
    controller.analyze()
    controller.ask("question")
    controller.upload(FakeUpload("other.txt", "text/plain"))
    state = controller.state
    assert state.document.name == "other.txt"
    assert state.result is None and state.session is None and state.messages == []


def test_remove_and_forget_key():
    controller, _ = make_controller([REPLY])
    controller.upload(FakeUpload("contract.pdf", "application/pdf"))
    controller.analyze()
    controller.remove_document()
    assert controller.state.document is None and not controller.state.has_analysis
    controller.forget_api_key()
    assert not controller.state.has_key


def test_email_and_export():
    controller, _ = make_controller([REPLY])
    assert controller.email_draft() == ""
    controller.upload(FakeUpload("contract.pdf", "application/pdf"))
    controller.analyze()
    assert "Subject: Contract Review - contract.pdf - Health Future Findings" in controller.email_draft()
    data = json.loads(controller.export_json())
    assert data["analysis"]["overallScore"] == 62
    assert data["meta"]["organization"] == "Health Future"
    assert "test-key" not in controller.export_json()


def test_forget_key_clears_analysis_state():
    controller, _ = make_controller([REPLY, "answer"])
    controller.upload(FakeUpload("contract.pdf", "application/pdf"))
    controller.analyze()
    controller.ask("question")
    controller.forget_api_key()
    state = controller.state
    assert not state.has_key
    assert state.document is None
    assert state.result is None and state.session is None and state.messages == []
    assert not controller.can_chat


def test_posted_message_pending_until_delivered():
    controller, factory = make_controller([REPLY, "Vendor pays."])
    controller.upload(FakeUpload("contract.pdf", "application/pdf"))
    controller.analyze()
    user_msg = controller.post_message("Who pays freight?")
    assert controller.state.messages[-1] is user_msg
    assert user_msg.status == MessageStatus.PENDING
    assert len(factory.sessions[0].sent) == 1
    controller.deliver_message(user_msg)
    assert user_msg.status == MessageStatus.DELIVERED
    assert controller.state.messages[-1].text == "Vendor pays."
