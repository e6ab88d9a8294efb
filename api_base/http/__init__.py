"""FastAPI integration for the API base layer."""

from api_base.http.application import create_app, setup_api
from api_base.http.dependencies import (
    AppSettings,
    Context,
    Responder,
    get_responder,
    get_response_context,
    responder_for,
)
from api_base.http.error_handlers import register_error_handlers

__all__ = [
    "AppSettings",
    "Context",
    "Responder",
    "create_app",
    "get_responder",
    "get_response_context",
    "register_error_handlers",
    "responder_for",
    "setup_api",
]
