"""Prescription summaries over WhatsApp template messages (Meta Graph API)."""

import json
import re

import requests
from loguru import logger

from healthbuddy.config import RelaySettings
from healthbuddy.errors import RelayError
from healthbuddy.models import PrescriptionInfo

TIMEOUT_SECONDS = 30


def normalize_recipient(to: str) -> str:
    """Keep only the digits of a phone number, e.g. ``"123-456-7890"`` -> ``"1234567890"``."""
    return re.sub(r"\D", "", to)


def format_phone(phone: str) -> str:
    return phone if phone.startswith("+") else "+" + normalize_recipient(phone)


def build_template_payload(settings: RelaySettings, to: str, name: str, body: str) -> dict:
    """Template message with two body parameters: patient name, then summary body."""
    return {
        "messaging_product": "whatsapp",
        "to": normalize_recipient(to),
        "type": "template",
        "template": {
            "name": settings.template_name,
            "language": {"code": settings.template_language},
            "components": [{
                "type": "body",
                "parameters": [
                    {"type": "text", "text": name},
                    {"type": "text", "text": body},
                ],
            }],
        },
    }


def format_prescription_summary(info: PrescriptionInfo) -> str:
    body = "*MEDICATIONS*\n"
    if info.medications:
        body += "\n".join(f"• *{med.name}* ({med.dosage}): {med.timing}" for med in info.medications)
    else:
        body += "_No medications found._\n"

    if info.precautions:
        body += "\n\n*PRECAUTIONS & ADVICE*\n"
        body += "\n".join(f"• {note}" for note in info.precautions)

    if info.vitals:
        body += "\n\n*VITALS*\n"
        body += "\n".join(f"• {key}: {value}" for key, value in info.vitals.items())

    return body


class WhatsAppClient:
    def __init__(self, settings: RelaySettings):
        self.settings = settings

    def send_template(self, to: str, name: str, body: str) -> dict:
        payload = build_template_payload(self.settings, to, name, body)
        logger.info("Sending template {!r} to {}", self.settings.template_name, payload["to"])
        try:
            response = requests.post(
                self.settings.messages_url,
                json=payload,
                headers={"Authorization": f"Bearer {self.settings.access_token}"},
                timeout=TIMEOUT_SECONDS,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            details = _error_details(e)
            logger.error("Meta API error: {}", json.dumps(details, indent=2))
            raise RelayError("Failed to send WhatsApp message via Meta API.", details) from e

        try:
            data = response.json()
        except ValueError as e:
            details = {"message": response.text, "status": response.status_code}
            logger.error("Meta API returned a non-JSON reply: {}", details)
            raise RelayError("Failed to send WhatsApp message via Meta API.", details) from e
        logger.info("Message sent: {}", data)
        return data


def _error_details(error: requests.exceptions.RequestException) -> dict:
    if error.response is None:
        return {"message": str(error)}
    try:
        return error.response.json()
    except ValueError:
        return {"message": error.response.text, "status": error.response.status_code}


def send_prescription_summary(name: str, phone: str, info: PrescriptionInfo, relay_url: str) -> None:
    """Ask the relay backend to deliver the summary of ``info`` to ``phone``."""
    try:
        response = requests.post(
            f"{relay_url.rstrip('/')}/api/send-whatsapp",
            json={"to": format_phone(phone), "name": name, "body": format_prescription_summary(info)},
            timeout=TIMEOUT_SECONDS,
        )
    except requests.exceptions.RequestException as e:
        logger.exception("Could not reach relay at {}", relay_url)
        raise RelayError(
            "Could not send the summary via WhatsApp. Please check the phone number or try again later.",
            {"message": str(e)},
        ) from e

    if not response.ok:
        try:
            result = response.json()
        except ValueError:
            result = {"error": response.text}
        logger.error("Relay rejected summary: {}", result)
        raise RelayError(
            "Could not send the summary via WhatsApp. Please check the phone number or try again later.",
            result,
        )
