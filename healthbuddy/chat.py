"""Multi-turn chat sessions with the Health Buddy persona."""

import threading
import time
import uuid

from langchain_google_genai import ChatGoogleGenerativeAI
from loguru import logger

from healthbuddy import config
from healthbuddy.errors import ChatSessionBusyError, ChatSessionNotFoundError, ResponseFormatError
from healthbuddy.gemini import response_text
from healthbuddy.models import ChatMessage
from healthbuddy.prompts import CHAT_GREETING, CHAT_SYSTEM_PROMPT

SEND_FAILED_REPLY = (
    "Sorry, something went wrong while talking to the AI. "
    "Please try sending your message again."
)


def _build_llm():
    return ChatGoogleGenerativeAI(
        model=config.GEMINI_MODEL,
        google_api_key=config.google_api_key(),
        temperature=config.GEMINI_TEMPERATURE,
    )


class ChatSession:
    """One conversation: the model-side turn history plus the displayed transcript.

    The transcript always opens with the greeting and then alternates
    user/model. Only successful exchanges enter the history sent to the model;
    a failed send still adds the user turn and an apology to the transcript.
    """

    def __init__(self, llm=None):
        self.session_id = str(uuid.uuid4())
        self._llm = llm
        self._history = [("system", CHAT_SYSTEM_PROMPT)]
        self._transcript = [ChatMessage(role="model", text=CHAT_GREETING)]
        self._sending = threading.Lock()
        self.last_active = time.monotonic()

    @property
    def messages(self) -> list[ChatMessage]:
        return list(self._transcript)

    def send(self, message: str) -> str:
        if not self._sending.acquire(blocking=False):
            raise ChatSessionBusyError(
                "Please wait for the reply to your previous message before sending another."
            )
        try:
            self._transcript.append(ChatMessage(role="user", text=message))
            try:
                if self._llm is None:
                    self._llm = _build_llm()
                reply = response_text(self._llm.invoke(self._history + [("user", message)]))
                if not reply.strip():
                    raise ResponseFormatError("No response text received from the AI model.")
            except Exception:
                logger.exception("Chat send failed in session {}", self.session_id)
                reply = SEND_FAILED_REPLY
            else:
                self._history += [("user", message), ("assistant", reply)]
            self._transcript.append(ChatMessage(role="model", text=reply))
            return reply
        finally:
            self._sending.release()


class ChatSessionStore:
    """Sessions owned by one HTTP app, addressed by the id handed to the client.

    Sessions idle for longer than ``ttl_seconds`` are dropped whenever a new
    one is created.
    """

    def __init__(self, ttl_seconds: float | None = None, clock=time.monotonic):
        self.ttl_seconds = config.CHAT_SESSION_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self._clock = clock
        self._sessions: dict[str, ChatSession] = {}
        self._lock = threading.Lock()

    def create(self) -> ChatSession:
        session = ChatSession()
        session.last_active = self._clock()
        with self._lock:
            self._sweep()
            self._sessions[session.session_id] = session
        logger.info("Started chat session {}", session.session_id)
        return session

    def get(self, session_id: str) -> ChatSession:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None:
                session.last_active = self._clock()
        if session is None:
            raise ChatSessionNotFoundError(f"Chat session {session_id} not found")
        return session

    def _sweep(self):
        cutoff = self._clock() - self.ttl_seconds
        expired = [
            sid for sid, session in self._sessions.items()
            if session.last_active < cutoff and not session._sending.locked()
        ]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info("Dropped {} idle chat sessions", len(expired))

    def __len__(self) -> int:
        return len(self._sessions)
