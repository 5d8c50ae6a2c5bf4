import json
import pytest
from src.analysis.contract_review import run_analysis, build_analysis_message, seed_message
from src.utils.config import AppConfig
from src.utils.exception import AnalysisError, ResponseParseError
from src.utils.types import DocumentPart, UploadedDocument

REPLY = json.dumps({
    "summary": "Deal looks standard.",
    "inconsistencies": ["Net 45 vs required Net 30"],
    "redFlags": ["Cyber liability $5M < $10M minimum"],
    "overallScore": 62,
})


class StubSession:
    def __init__(self, reply=REPLY, error=None):
        self.reply = reply
        self.error = error
        self.sent = []

    def send(self, parts):
        self.sent.append(parts)
        if self.error:
            raise self.error
        return self.reply


class StubClient:
    def __init__(self, session):
        self.session = session
        self.started = 0

    def start_session(self):
        self.started += 1
        return self.session


def contract():
    return UploadedDocument(name="contract.pdf", mime_type="application/pdf", data=b"%PDF-1.4")


def test_first_message_order():
    config = AppConfig()
    part = DocumentPart(data="JVBERg==", mime_type="application/pdf")
    parts = build_analysis_message(config, part)
    assert len(parts) == 3
    assert "Supply Chain Legal Analyst" in parts[0]
    assert parts[1] is part
    assert "Net 30 days" in parts[2] and "Governing Law: State of Oregon" in parts[2]


def test_run_analysis_returns_result_and_session():
    session = StubSession(reply="```json\n" + REPLY + "\n```")
    client = StubClient(session)
    result, returned = run_analysis(client, contract(), AppConfig())
    assert returned is session
    assert client.started == 1
    assert result.overall_score == 62
    sent = session.sent[0]
    assert isinstance(sent[1], DocumentPart) and sent[1].data == "JVBERi0xLjQ="


def test_transport_failure_wrapped():
    client = StubClient(StubSession(error=ConnectionError("offline")))
    with pytest.raises(AnalysisError):
        run_analysis(client, contract(), AppConfig())


def test_parse_failure_is_analysis_error():
    client = StubClient(StubSession(reply="not json"))
    with pytest.raises(AnalysisError) as exc:
        run_analysis(client, contract(), AppConfig())
    assert isinstance(exc.value, ResponseParseError)


def test_seed_message_counts():
    client = StubClient(StubSession())
    result, _ = run_analysis(client, contract(), AppConfig())
    text = seed_message("contract.pdf", result, AppConfig())
    assert text == ("I've analyzed contract.pdf against the Health Future standards. "
                    "I found 1 inconsistencies and 1 red flags.")
