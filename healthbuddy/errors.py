"""Exceptions raised by the gateway, chat sessions and the messaging relay."""


class HealthBuddyError(Exception):
    """Base error. ``message`` is safe to show to the end user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(HealthBuddyError):
    pass


class ResponseFormatError(HealthBuddyError):
    """The model returned nothing, non-JSON text, or JSON that fails validation."""


class MedicineLookupError(HealthBuddyError):
    pass


class AnalysisError(HealthBuddyError):
    pass


class TranslationError(HealthBuddyError):
    pass


class ChatSessionBusyError(HealthBuddyError):
    pass


class ChatSessionNotFoundError(HealthBuddyError):
    pass


class RelayError(HealthBuddyError):
    """Relay or upstream messaging failure; ``details`` keeps the upstream body."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}
