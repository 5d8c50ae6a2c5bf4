from __future__ import annotations
import base64
import threading
from typing import List, Union
import google.generativeai as genai
from google.generativeai import client as genai_client
from src.utils.config import AppConfig
from src.utils.exception import CredentialError
from src.utils.logger import logger
from src.utils.types import DocumentPart

MessagePart = Union[str, DocumentPart]

# genai.configure mutates process-wide defaults shared by every browser session.
_CONFIGURE_LOCK = threading.Lock()


def to_content(parts: List[MessagePart]) -> list:
    """Translate message parts into the content list the SDK accepts."""
    content = []
    for part in parts:
        if isinstance(part, DocumentPart):
            content.append({"mime_type": part.mime_type, "data": base64.b64decode(part.data)})
        else:
            content.append(part)
    return content


class GeminiSession:
    """One ongoing conversation; the SDK chat object keeps the history."""

    def __init__(self, chat):
        self._chat = chat

    def send(self, parts: Union[str, List[MessagePart]]) -> str:
        if isinstance(parts, str):
            parts = [parts]
        rsp = self._chat.send_message(to_content(parts))
        return rsp.text


class GeminiClient:
    def __init__(self, config: AppConfig, api_key: str):
        if not api_key or not api_key.strip():
            raise CredentialError("A Gemini API key is required.")
        self.config = config
        with _CONFIGURE_LOCK:
            genai.configure(api_key=api_key.strip())
            self.model = genai.GenerativeModel(
                config.model_name,
                generation_config={"temperature": config.temperature, "max_output_tokens": config.max_tokens},
            )
            # Pin a client built from this key; the model would otherwise pick up
            # whatever key the process default holds at its first send.
            self.model._client = genai_client.get_default_generative_client()
            genai.configure(api_key=None)

    def start_session(self) -> GeminiSession:
        logger.debug("Starting chat session on %s", self.config.model_name)
        return GeminiSession(self.model.start_chat(history=[]))
