from __future__ import annotations
from typing import List
from src.utils.exception import ChatUnavailableError
from src.utils.logger import logger
from src.utils.types import ChatMessage, MessageStatus, Role

APOLOGY_TEXT = "Sorry, I encountered an error processing that request."


class Conversation:
    """Follow-up chat over the session that produced the analysis.

    The user's message is appended before the network call and its status moves
    pending -> delivered | failed once the call resolves.
    """

    def __init__(self, session, messages: List[ChatMessage] | None = None):
        self.session = session
        self.messages: List[ChatMessage] = messages if messages is not None else []

    def seed(self, text: str) -> ChatMessage:
        msg = ChatMessage(Role.ASSISTANT, text)
        self.messages.append(msg)
        return msg

    def post(self, text: str) -> ChatMessage:
        """Append the user's message as pending, before anything is sent."""
        if self.session is None:
            raise ChatUnavailableError("Run an analysis before chatting.")
        text = (text or "").strip()
        if not text:
            raise ValueError("Message is empty")
        user_msg = ChatMessage(Role.USER, text, MessageStatus.PENDING)
        self.messages.append(user_msg)
        return user_msg

    def deliver(self, user_msg: ChatMessage) -> ChatMessage:
        """Send a posted message on the session and append the reply."""
        try:
            reply_text = self.session.send(user_msg.text)
        except Exception:
            logger.exception("Chat send failed")
            user_msg.status = MessageStatus.FAILED
            reply = ChatMessage(Role.ASSISTANT, APOLOGY_TEXT, MessageStatus.FAILED)
        else:
            user_msg.status = MessageStatus.DELIVERED
            reply = ChatMessage(Role.ASSISTANT, reply_text)
        self.messages.append(reply)
        return reply

    def send(self, text: str) -> ChatMessage:
        """Send one user message and return the message appended in reply."""
        return self.deliver(self.post(text))

    def __len__(self) -> int:
        return len(self.messages)
