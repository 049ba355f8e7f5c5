"""Process configuration read from the environment."""

import os

from pydantic import BaseModel

from healthbuddy.errors import ConfigurationError

GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-2.5-flash")
GEMINI_TEMPERATURE = float(os.environ.get("GEMINI_TEMPERATURE", "0.2"))

RELAY_URL = os.environ.get("RELAY_URL", "http://localhost:3001")
CHAT_SESSION_TTL_SECONDS = float(os.environ.get("CHAT_SESSION_TTL_SECONDS", "3600"))


def google_api_key() -> str | None:
    return os.environ.get("GOOGLE_API_KEY")


def allowed_origins() -> list[str]:
    origins_env = os.environ.get("ALLOWED_ORIGINS", "")
    origins = [o.strip() for o in origins_env.split(",") if o.strip()]
    return origins or ["*"]


class RelaySettings(BaseModel):
    access_token: str
    phone_number_id: str
    template_name: str
    api_version: str = "v19.0"
    template_language: str = "en_US"

    @property
    def messages_url(self) -> str:
        return f"https://graph.facebook.com/{self.api_version}/{self.phone_number_id}/messages"

    @classmethod
    def from_env(cls) -> "RelaySettings":
        required = {
            "access_token": "META_WA_ACCESS_TOKEN",
            "phone_number_id": "META_WA_PHONE_NUMBER_ID",
            "template_name": "META_WA_TEMPLATE_NAME",
        }
        missing = [var for var in required.values() if not os.environ.get(var)]
        if missing:
            raise ConfigurationError(
                "Meta WhatsApp credentials are not set: " + ", ".join(missing)
            )
        return cls(
            **{field: os.environ[var] for field, var in required.items()},
            api_version=os.environ.get("META_WA_API_VERSION", "v19.0"),
            template_language=os.environ.get("META_WA_TEMPLATE_LANGUAGE", "en_US"),
        )
