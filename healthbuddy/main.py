"""FastAPI service for GenAI Health Buddy."""

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, File, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from healthbuddy import gemini
from healthbuddy.chat import ChatSessionStore
from healthbuddy.config import allowed_origins
from healthbuddy.errors import ChatSessionBusyError, ChatSessionNotFoundError, HealthBuddyError
from healthbuddy.models import (
    LANGUAGES,
    ChatReplyResponse,
    ChatRequest,
    ChatSessionResponse,
    CompareRequest,
    MedicineComparison,
    MedicineInfo,
    MedicineRequest,
    PrescriptionInfo,
    SymptomInfo,
    SymptomRequest,
    TranslateRequest,
)

RECORD_TYPES = {
    "medicine": MedicineInfo,
    "prescription": PrescriptionInfo,
    "symptom": SymptomInfo,
}

app = FastAPI(
    title="GenAI Health Buddy",
    description="Medicine lookup, prescription analysis, symptom checks and health chat using Google Gemini",
    version="1.0.0",
)
app.state.chat_sessions = ChatSessionStore()

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _gateway_error(e: HealthBuddyError) -> HTTPException:
    return HTTPException(status_code=502, detail=e.message)


def _get_session(request: Request, session_id: str):
    try:
        return request.app.state.chat_sessions.get(session_id)
    except ChatSessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@app.get("/health")
def health_check():
    return {"status": "healthy", "service": "genai-health-buddy"}


@app.get("/languages")
def languages():
    return [{"code": code, "name": name} for code, name in LANGUAGES.items()]


@app.post("/medicine", response_model=MedicineInfo)
def medicine(request: MedicineRequest):
    try:
        return gemini.get_medicine_info(request.name)
    except HealthBuddyError as e:
        raise _gateway_error(e)


@app.post("/medicine/compare", response_model=MedicineComparison)
def compare(request: CompareRequest):
    try:
        return gemini.compare_medicines(request.first, request.second, request.lang)
    except HealthBuddyError as e:
        raise _gateway_error(e)


@app.post("/prescription", response_model=PrescriptionInfo)
def prescription(file: UploadFile = File(...)):
    if not (file.content_type or "").startswith("image/"):
        raise HTTPException(status_code=400, detail="Uploaded file must be an image.")
    image = file.file.read()
    try:
        return gemini.analyze_prescription(image, file.content_type)
    except HealthBuddyError as e:
        raise _gateway_error(e)


@app.post("/symptoms", response_model=SymptomInfo)
def symptoms(request: SymptomRequest):
    try:
        return gemini.analyze_symptoms(request.symptoms)
    except HealthBuddyError as e:
        raise _gateway_error(e)


@app.post("/translate")
def translate(request: TranslateRequest):
    record_type = RECORD_TYPES[request.kind]
    try:
        record = record_type.model_validate(request.data)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=f"Invalid {request.kind} record: {e}")

    try:
        return gemini.translate(record, request.lang).model_dump(exclude_none=True)
    except HealthBuddyError as e:
        raise _gateway_error(e)


@app.post("/chat/sessions", response_model=ChatSessionResponse)
def start_chat(request: Request):
    session = request.app.state.chat_sessions.create()
    return ChatSessionResponse(session_id=session.session_id, messages=session.messages)


@app.post("/chat/sessions/{session_id}/messages", response_model=ChatReplyResponse)
def send_chat_message(session_id: str, body: ChatRequest, request: Request):
    session = _get_session(request, session_id)
    try:
        reply = session.send(body.message)
    except ChatSessionBusyError as e:
        raise HTTPException(status_code=409, detail=e.message)
    return ChatReplyResponse(session_id=session_id, reply=reply, messages=session.messages)


@app.get("/chat/sessions/{session_id}/history", response_model=ChatSessionResponse)
def chat_history(session_id: str, request: Request):
    session = _get_session(request, session_id)
    return ChatSessionResponse(session_id=session_id, messages=session.messages)
