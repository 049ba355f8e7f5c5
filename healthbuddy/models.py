"""Pydantic models for model responses and HTTP request/response bodies."""

from typing import Literal

from pydantic import BaseModel, Field

InteractionLevel = Literal["High", "Moderate", "Low"]
Urgency = Literal["Low", "Medium", "High", "Emergency"]
LanguageCode = Literal["en", "hi", "bn", "ta", "te", "mr", "gu", "kn"]

LANGUAGES: dict[str, str] = {
    "en": "English",
    "hi": "हिन्दी",
    "bn": "বাংলা",
    "ta": "தமிழ்",
    "te": "తెలుగు",
    "mr": "मराठी",
    "gu": "ગુજરાતી",
    "kn": "ಕನ್ನಡ",
}


# -- Records returned by the model --

class MedicineInfo(BaseModel):
    name: str
    uses: list[str]
    dosage: str
    side_effects: list[str]
    precautions: list[str]


class Medication(BaseModel):
    name: str
    dosage: str
    timing: str
    purpose: str


class DrugInteraction(BaseModel):
    medicines: list[str] = Field(min_length=2)
    interaction_level: InteractionLevel
    description: str


class PrescriptionInfo(BaseModel):
    medications: list[Medication]
    precautions: list[str]
    vitals: dict[str, str] | None = None
    drug_interactions: list[DrugInteraction]
    lifestyle_and_diet_recos: list[str]
    potential_conditions_summary: str


class PossibleCondition(BaseModel):
    name: str
    description: str


class SymptomInfo(BaseModel):
    disclaimer: str
    summary: str
    possible_conditions: list[PossibleCondition]
    advice: list[str]
    urgency: Urgency


class MedicineComparison(BaseModel):
    first: MedicineInfo
    second: MedicineInfo


class ChatMessage(BaseModel):
    role: Literal["user", "model"]
    text: str


# -- HTTP API bodies --

class MedicineRequest(BaseModel):
    name: str = Field(min_length=1, pattern=r"\S")


class CompareRequest(BaseModel):
    first: str = Field(min_length=1, pattern=r"\S")
    second: str = Field(min_length=1, pattern=r"\S")
    lang: LanguageCode = "en"


class SymptomRequest(BaseModel):
    symptoms: str = Field(min_length=1, pattern=r"\S")


class TranslateRequest(BaseModel):
    kind: Literal["medicine", "prescription", "symptom"]
    data: dict
    lang: LanguageCode


class ChatRequest(BaseModel):
    message: str = Field(min_length=1, pattern=r"\S")


class ChatSessionResponse(BaseModel):
    session_id: str
    messages: list[ChatMessage]


class ChatReplyResponse(BaseModel):
    session_id: str
    reply: str
    messages: list[ChatMessage]


class WhatsAppRequest(BaseModel):
    to: str | None = None
    name: str | None = None
    body: str | None = None
