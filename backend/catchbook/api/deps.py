"""FastAPI dependencies: the injected record store, AI client and user.

There are no sessions: every request acts for the configured default user.
"""
from fastapi import Depends, Request

from catchbook.ai.groq_client import AIClient
from catchbook.core.config import settings
from catchbook.core.exceptions import BusinessError, StoreError
from catchbook.schemas.records import User
from catchbook.services.store import RecordStore


def get_store(request: Request) -> RecordStore:
    """Record store constructed by create_app."""
    return request.app.state.store


def get_ai_client(request: Request) -> AIClient:
    """AI client constructed by create_app."""
    return request.app.state.ai_client


def get_current_user_id() -> str:
    return settings.DEFAULT_USER_ID


def get_current_user(
    store: RecordStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
) -> User:
    """Load the default user from the store."""
    try:
        user = store.get_user(user_id)
    except StoreError as e:
        raise BusinessError.server_error("Failed to load user", e)
    if not user:
        raise BusinessError.not_found("User", f"default user {user_id} missing from store")
    return user
