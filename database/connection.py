import functools
import logging
from typing import Callable, TypeVar

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from app.core.config import settings
from app.core.errors import DuplicateKey, PersistenceFailure, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

UNIQUE_VIOLATION = "23505"
INVALID_TEXT_REPRESENTATION = "22P02"


def init_db():
    """Initialize database connection - verify Supabase connection.

    Note: Schema is managed via Supabase migrations (see database/schema.py), not here.
    """
    if not settings.supabase_url or not settings.supabase_secret_key:
        logger.warning("Supabase credentials not configured. Database features disabled.")
        return

    try:
        from .supabase_client import get_supabase_client
        client = get_supabase_client()
        # Try a simple query - may fail if migrations haven't run yet
        client.table("businesses").select("id").limit(1).execute()
        logger.info("Supabase connection verified")
    except Exception as e:
        logger.warning(f"Supabase connection check failed: {e}")
        logger.warning("Make sure migrations have been run and credentials are correct.")


def get_db() -> Client:
    """Get database client - Supabase compatible."""
    from .supabase_client import get_supabase_client
    return get_supabase_client()


def translate_errors(func: Callable[..., T]) -> Callable[..., T]:
    """Decorator that maps PostgREST and transport errors onto the loyalty error taxonomy.

    Unique violations become DuplicateKey, malformed values the database
    could not cast become ValidationError, and every other store rejection,
    timeout or transport failure becomes PersistenceFailure. Nothing is
    retried; after a transport error the thread's client is reset so the
    next request starts on a fresh connection.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> T:
        try:
            return func(*args, **kwargs)
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise DuplicateKey(e.message or "Duplicate key") from e
            if e.code == INVALID_TEXT_REPRESENTATION:
                raise ValidationError(e.message or "Malformed identifier") from e
            logger.error(f"Store rejected {func.__name__}: {e.code} {e.message}")
            raise PersistenceFailure(e.message or f"Store rejected {func.__name__}") from e
        except httpx.TimeoutException as e:
            logger.error(f"Timeout in {func.__name__}: {e}")
            raise PersistenceFailure(f"Timed out in {func.__name__}") from e
        except httpx.HTTPError as e:
            from .supabase_client import reset_supabase_client

            logger.error(f"Transport error in {func.__name__}: {e}")
            reset_supabase_client()
            raise PersistenceFailure(f"Store unavailable in {func.__name__}") from e
    return wrapper
