"""Typed failures raised by the core and converted at the command boundary"""

from __future__ import annotations


class CopilotError(Exception):
    """Base error for all backend operations."""

    kind = "copilot_error"
    status_code = 500


class MissingApiKeyError(CopilotError):
    """No API key configured; the operation aborts before changing state."""

    kind = "missing_api_key"
    status_code = 401

    def __init__(self):
        super().__init__("API Key not set! Please provide your Gemini API key.")


class GatewayError(CopilotError):
    """Failure reported by the model gateway."""

    kind = "gateway_error"
    status_code = 502


class NetworkError(GatewayError):
    """Transport failure or timeout talking to the endpoint."""

    kind = "network_error"


class EndpointError(GatewayError):
    """The endpoint answered with a non-200 status."""

    kind = "endpoint_error"

    def __init__(self, status_code: int, message: str):
        self.endpoint_status = status_code
        self.message = message
        super().__init__(message)


class MalformedResponseError(GatewayError):
    """A 200 response without the expected candidate text."""

    kind = "malformed_response"


class RequestCancelled(GatewayError):
    """The in-flight request was cancelled through its token."""

    kind = "cancelled"
    status_code = 499

    def __init__(self):
        super().__init__("Request cancelled")


class DocumentNotFoundError(CopilotError):
    kind = "document_not_found"
    status_code = 404

    def __init__(self, document_id: str):
        self.document_id = document_id
        super().__init__(f"Document not open: {document_id}")


class DiagnosticNotFoundError(CopilotError):
    kind = "diagnostic_not_found"
    status_code = 404

    def __init__(self, diagnostic_id: str):
        self.diagnostic_id = diagnostic_id
        super().__init__(f"Diagnostic not found: {diagnostic_id}")


class EmptySelectionError(CopilotError):
    kind = "empty_selection"
    status_code = 400

    def __init__(self, message: str = "No code selected!"):
        super().__init__(message)


class UnsupportedLanguageError(CopilotError):
    kind = "unsupported_language"
    status_code = 400

    def __init__(self, language_id: str):
        self.language_id = language_id
        super().__init__(f"Language not supported: {language_id}")


class SessionBusyError(CopilotError):
    """A chat request is already outstanding for this session."""

    kind = "session_busy"
    status_code = 409

    def __init__(self):
        super().__init__("A chat request is already in progress")
