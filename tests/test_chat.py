"""Tests for chat sessions and the session store."""

import threading

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from langchain_core.messages import AIMessage

from healthbuddy import chat
from healthbuddy.chat import SEND_FAILED_REPLY, ChatSession, ChatSessionStore
from healthbuddy.errors import ChatSessionBusyError, ChatSessionNotFoundError
from healthbuddy.prompts import CHAT_GREETING, CHAT_SYSTEM_PROMPT


class RecordingLLM:
    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    def invoke(self, messages):
        self.calls.append(list(messages))
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return AIMessage(content=reply)


class BlockingLLM:
    """Holds the first send open until ``release`` is set."""

    def __init__(self):
        self.entered = threading.Event()
        self.release = threading.Event()

    def invoke(self, messages):
        self.entered.set()
        self.release.wait(timeout=5)
        return AIMessage(content="Done.")


class TestChatSession:
    def test_starts_with_greeting(self):
        session = ChatSession(llm=FakeListChatModel(responses=[]))
        assert [m.model_dump() for m in session.messages] == [
            {"role": "model", "text": CHAT_GREETING}
        ]
        assert "Disclaimer" in CHAT_GREETING

    def test_transcript_grows_by_two_per_send(self):
        session = ChatSession(llm=FakeListChatModel(responses=["First reply.", "Second reply.", "Third reply."]))
        replies = [session.send(text) for text in ["Hi", "Is ibuprofen safe?", "Thanks"]]

        assert replies == ["First reply.", "Second reply.", "Third reply."]
        messages = session.messages
        assert len(messages) == 2 * 3 + 1
        assert [m.role for m in messages] == ["model", "user", "model", "user", "model", "user", "model"]
        assert messages[3].text == "Is ibuprofen safe?"
        assert messages[4].text == "Second reply."

    def test_model_sees_persona_and_full_history(self):
        llm = RecordingLLM("Hello!", "Take it with food.")
        session = ChatSession(llm=llm)
        session.send("Hi")
        session.send("How should I take ibuprofen?")

        assert llm.calls[1] == [
            ("system", CHAT_SYSTEM_PROMPT),
            ("user", "Hi"),
            ("assistant", "Hello!"),
            ("user", "How should I take ibuprofen?"),
        ]

    def test_failure_folded_into_transcript(self):
        llm = RecordingLLM(RuntimeError("quota exceeded"), "Back again.")
        session = ChatSession(llm=llm)

        assert session.send("Hi") == SEND_FAILED_REPLY
        assert session.messages[-1].role == "model"
        assert session.messages[-1].text == SEND_FAILED_REPLY

        assert session.send("Hi again") == "Back again."
        # the failed turn is not replayed to the model
        assert llm.calls[1] == [("system", CHAT_SYSTEM_PROMPT), ("user", "Hi again")]
        assert len(session.messages) == 5

    def test_empty_reply_is_a_failure(self):
        session = ChatSession(llm=RecordingLLM(""))
        assert session.send("Hi") == SEND_FAILED_REPLY

    def test_model_built_lazily(self, monkeypatch):
        built = []

        def build():
            built.append(True)
            return FakeListChatModel(responses=["Hello!"])

        monkeypatch.setattr(chat, "_build_llm", build)
        session = ChatSession()
        assert built == []
        assert session.send("Hi") == "Hello!"
        assert built == [True]

    def test_missing_credentials_become_apology(self, monkeypatch):
        def build():
            raise ValueError("GOOGLE_API_KEY not set")

        monkeypatch.setattr(chat, "_build_llm", build)
        assert ChatSession().send("Hi") == SEND_FAILED_REPLY

    def test_overlapping_send_refused(self):
        llm = BlockingLLM()
        session = ChatSession(llm=llm)
        worker = threading.Thread(target=session.send, args=("first",))
        worker.start()
        assert llm.entered.wait(timeout=5)

        with pytest.raises(ChatSessionBusyError):
            session.send("second")

        llm.release.set()
        worker.join(timeout=5)
        assert [m.text for m in session.messages[1:]] == ["first", "Done."]


class TestChatSessionStore:
    def test_create_and_get(self):
        store = ChatSessionStore()
        session = store.create()
        assert store.get(session.session_id) is session
        assert len(store) == 1

    def test_sessions_are_independent(self):
        store = ChatSessionStore()
        first, second = store.create(), store.create()
        assert first.session_id != second.session_id

    def test_unknown_session(self):
        with pytest.raises(ChatSessionNotFoundError):
            ChatSessionStore().get("missing")

    def test_idle_sessions_dropped_on_create(self):
        now = [0.0]
        store = ChatSessionStore(ttl_seconds=60, clock=lambda: now[0])
        idle = store.create()
        now[0] = 30.0
        active = store.create()

        now[0] = 75.0
        store.get(active.session_id)
        store.create()

        assert len(store) == 2
        with pytest.raises(ChatSessionNotFoundError):
            store.get(idle.session_id)
        assert store.get(active.session_id) is active

    def test_session_mid_send_kept(self):
        now = [0.0]
        store = ChatSessionStore(ttl_seconds=60, clock=lambda: now[0])
        session = store.create()
        session._sending.acquire()
        try:
            now[0] = 500.0
            store.create()
            assert store.get(session.session_id) is session
        finally:
            session._sending.release()
