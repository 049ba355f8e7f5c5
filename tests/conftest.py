"""Shared fixtures: scripted Gemini models and HTTP test clients."""

import copy
import json
import threading

import pytest
from fastapi.testclient import TestClient
from langchain_core.messages import AIMessage

from healthbuddy import gemini
from healthbuddy.chat import ChatSessionStore
from healthbuddy.config import RelaySettings
from healthbuddy.main import app
from healthbuddy.relay_app import create_app

DOLO_650 = {
    "name": "Dolo 650",
    "uses": ["Fever", "Pain relief"],
    "dosage": "1 tablet every 6 hours",
    "side_effects": ["Nausea"],
    "precautions": ["Avoid alcohol"],
}

CROCIN = {
    "name": "Crocin",
    "uses": ["Fever", "Headache"],
    "dosage": "1 tablet every 4-6 hours",
    "side_effects": ["Rash"],
    "precautions": ["Do not exceed 4 tablets a day"],
}

PRESCRIPTION = {
    "medications": [
        {"name": "Amlodipine", "dosage": "5mg", "timing": "1-0-0 After food", "purpose": "Blood pressure"},
        {"name": "Atorvastatin", "dosage": "10mg", "timing": "0-0-1 After food", "purpose": "Cholesterol"},
    ],
    "precautions": ["Avoid grapefruit juice"],
    "vitals": {"BP": "150/95", "Pulse": "82"},
    "drug_interactions": [
        {
            "medicines": ["Amlodipine", "Atorvastatin"],
            "interaction_level": "Moderate",
            "description": "Amlodipine can raise atorvastatin levels; report muscle pain.",
        }
    ],
    "lifestyle_and_diet_recos": ["Reduce salt intake", "Walk 30 minutes a day"],
    "potential_conditions_summary": "Hypertension with high cholesterol.",
}

SYMPTOMS = {
    "disclaimer": "This is not a medical diagnosis. Please consult a doctor.",
    "summary": "Your symptoms are consistent with a viral infection.",
    "possible_conditions": [
        {"name": "Common cold", "description": "A mild viral infection of the nose and throat."},
        {"name": "Influenza", "description": "A viral infection with fever and body aches."},
    ],
    "advice": ["Rest and drink fluids", "See a doctor if fever lasts more than 3 days"],
    "urgency": "Low",
}


def payload(record: dict) -> dict:
    return copy.deepcopy(record)


class ScriptedLLM:
    """Stands in for ChatGoogleGenerativeAI: replays responses and records calls.

    A response may be a string (returned as the message content) or an
    exception instance (raised from ``invoke``).
    """

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []
        self.schemas = []
        self._lock = threading.Lock()

    def build(self, response_schema=None):
        self.schemas.append(response_schema)
        return self

    def invoke(self, messages):
        with self._lock:
            self.calls.append(messages)
            response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return AIMessage(content=response)


@pytest.fixture
def fake_gemini(monkeypatch):
    """Install a ScriptedLLM behind the gateway. JSON-able responses are dumped."""

    def install(*responses):
        scripted = [
            r if isinstance(r, (str, Exception)) else json.dumps(r)
            for r in responses
        ]
        llm = ScriptedLLM(scripted)
        monkeypatch.setattr(gemini, "_build_llm", llm.build)
        return llm

    return install


@pytest.fixture
def client():
    app.state.chat_sessions = ChatSessionStore()
    return TestClient(app)


@pytest.fixture
def relay_settings():
    return RelaySettings(
        access_token="test-token",
        phone_number_id="1098765",
        template_name="prescription_summary",
    )


@pytest.fixture
def relay_client(relay_settings):
    return TestClient(create_app(relay_settings))
