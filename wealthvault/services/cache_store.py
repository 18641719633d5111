# wealthvault/services/cache_store.py
"""Keyed text cache stored in the cached_payloads table."""

import logging
from collections.abc import Callable

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wealthvault.models import CachedPayload

logger = logging.getLogger(__name__)


class SqlPayloadCache:
    """
    Never-expiring key/value cache.

    Read failures are logged and reported as a miss; the callers treat the
    cache as best-effort and fall through to the provider.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def get(self, key: str) -> str | None:
        try:
            with self._session_factory() as db:
                entry = db.get(CachedPayload, key)
                return entry.payload if entry is not None else None
        except SQLAlchemyError as e:
            logger.warning(f"Cache read failed for {key}: {e}")
            return None

    def put(self, key: str, payload: str) -> None:
        try:
            with self._session_factory() as db:
                entry = db.get(CachedPayload, key)
                if entry is None:
                    db.add(CachedPayload(key=key, payload=payload))
                else:
                    entry.payload = payload
                db.commit()
        except SQLAlchemyError as e:
            logger.warning(f"Cache write failed for {key}: {e}")

    def delete(self, key: str) -> None:
        try:
            with self._session_factory() as db:
                db.execute(delete(CachedPayload).where(CachedPayload.key == key))
                db.commit()
        except SQLAlchemyError as e:
            logger.warning(f"Cache delete failed for {key}: {e}")
