"""
Client module - Python client for the Job Portal API.
"""
from app.client.api_client import ApiClient, ApiError
from app.client.session import SessionStore

__all__ = ["ApiClient", "ApiError", "SessionStore"]
