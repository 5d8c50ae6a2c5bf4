from __future__ import annotations
from typing import Any, Callable, Dict
from src.analysis.contract_review import run_analysis, seed_message
from src.chat.conversation import Conversation
from src.ingest.document_loader import load_document
from src.llm.gemini import GeminiClient
from src.report.email_draft import build_email_draft
from src.report.json_export import build_analysis_json
from src.session.app_state import AppState
from src.utils.config import AppConfig
from src.utils.exception import CredentialError, ChatUnavailableError, AnalysisError
from src.utils.types import AnalysisResult, ChatMessage, Role, UploadedDocument

APP_NAME = "SupplyChain Guard"
APP_VERSION = "0.1.0"


class ReviewController:
    """Owns the AppState and runs every user action against it.

    `client_factory(config, api_key)` must return an object with
    `start_session()`; tests pass a stub instead of GeminiClient.
    """

    def __init__(self, config: AppConfig, state: AppState, client_factory: Callable[[AppConfig, str], Any] = GeminiClient):
        self.config = config
        self.state = state
        self.client_factory = client_factory

    def submit_api_key(self, api_key: str) -> None:
        if not api_key or not api_key.strip():
            raise CredentialError("Please enter an API key.")
        self.state.set_api_key(api_key)

    def forget_api_key(self) -> None:
        self.state.forget_api_key()

    def upload(self, uploaded_file) -> UploadedDocument:
        """Validate and load a new document; state is untouched if validation fails."""
        document = load_document(uploaded_file, self.config)
        self.state.load_document(document)
        return document

    def remove_document(self) -> None:
        self.state.clear_document()

    def analyze(self) -> AnalysisResult:
        state = self.state
        if state.document is None:
            raise AnalysisError("Upload a contract first.")
        if state.has_analysis:
            return state.result
        if not state.has_key:
            raise CredentialError("A Gemini API key is required.")
        try:
            client = self.client_factory(self.config, state.api_key)
        except CredentialError:
            raise
        except Exception as e:
            raise AnalysisError(f"Could not reach the model service: {e}") from e
        result, session = run_analysis(client, state.document, self.config)
        seed = ChatMessage(Role.ASSISTANT, seed_message(state.document.name, result, self.config))
        state.record_analysis(result, session, seed)
        return result

    @property
    def can_chat(self) -> bool:
        return self.state.has_analysis and self.state.session is not None

    def _conversation(self) -> Conversation:
        if not self.can_chat:
            raise ChatUnavailableError("Run an analysis before chatting.")
        return Conversation(self.state.session, self.state.messages)

    def post_message(self, text: str) -> ChatMessage:
        return self._conversation().post(text)

    def deliver_message(self, user_msg: ChatMessage) -> ChatMessage:
        return self._conversation().deliver(user_msg)

    def ask(self, text: str) -> ChatMessage:
        return self._conversation().send(text)

    def email_draft(self) -> str:
        document_name = self.state.document.name if self.state.document else None
        return build_email_draft(self.state.result, document_name, self.config.org_name)

    def export_json(self) -> str:
        meta: Dict[str, Any] = {
            "app": APP_NAME,
            "version": APP_VERSION,
            "model": self.config.model_name,
            "organization": self.config.org_name,
        }
        return build_analysis_json(self.state.document, self.state.result, self.state.messages, meta)
