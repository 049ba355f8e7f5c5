"""Relay backend that forwards prescription summaries to the WhatsApp template API.

Run with ``uvicorn healthbuddy.relay_app:create_app --factory --port 3001``.
Startup fails if the Meta WhatsApp credentials are missing.
"""

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from loguru import logger

from healthbuddy.config import RelaySettings, allowed_origins
from healthbuddy.errors import RelayError
from healthbuddy.models import WhatsAppRequest
from healthbuddy.whatsapp import WhatsAppClient

STATUS_PAGE = "<h1>GenAI Health Buddy Backend (Meta API)</h1><p>Server is running correctly.</p>"
MISSING_FIELDS_ERROR = 'Missing "to", "name", or "body" in request.'


def _missing_fields() -> JSONResponse:
    return JSONResponse(status_code=400, content={"success": False, "error": MISSING_FIELDS_ERROR})


def create_app(settings: RelaySettings | None = None) -> FastAPI:
    if settings is None:
        settings = RelaySettings.from_env()
    client = WhatsAppClient(settings)

    app = FastAPI(title="GenAI Health Buddy Relay", version="1.0.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError):
        logger.error("Validation error on {}: {}", request.url.path, exc.errors())
        return _missing_fields()

    @app.get("/", response_class=HTMLResponse)
    def status_page():
        return STATUS_PAGE

    @app.post("/api/send-whatsapp")
    def send_whatsapp(request: WhatsAppRequest):
        logger.info("Template message requested for {}", request.to)
        if not (request.to and request.name and request.body):
            logger.error("Validation error: missing 'to', 'name', or 'body'")
            return _missing_fields()

        try:
            data = client.send_template(request.to, request.name, request.body)
        except RelayError as e:
            return JSONResponse(
                status_code=500,
                content={"success": False, "error": e.message, "details": e.details},
            )
        return {"success": True, "data": data}

    return app
