"""Core functionality for anime-episodes."""

from .http_client import http_get, http_post
from .reconcile import Reconciliation
from .responses import ErrorCode, success_response, error_response

__all__ = [
    "http_get", "http_post",
    "Reconciliation",
    "ErrorCode", "success_response", "error_response",
]
