"""Database-backed session store.

`DatabaseSessionStore` is the single implementation of the `SessionStore`
contract. Every public method runs in its own transaction on a session from
the injected factory, so one store instance is safe to share across
concurrent requests. There is no row locking: two requests writing the same
session concurrently resolve as last write wins.

Rows are never deleted. Destroyed sessions are kept as ``revoked`` and
lapsed ones as ``expired`` so they stay available for auditing.
"""

import secrets
from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from typing import Any, AsyncGenerator, Callable, Dict, List, Optional

from sqlalchemy import and_, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

from bubbles_cafe.core.config.settings import settings
from bubbles_cafe.core.exceptions import SessionStoreError
from bubbles_cafe.core.logging import mask_session_id
from bubbles_cafe.domain.entities.session import SessionRecord, SessionStatus, utcnow
from bubbles_cafe.domain.interfaces.session_store import META_KEY, SessionStore
from bubbles_cafe.domain.services.csrf import generate_token

logger = get_logger(__name__)


class DatabaseSessionStore(SessionStore):
    """SQLAlchemy implementation of the session store.

    Args:
        session_factory: Factory producing `AsyncSession`s bound to the
            sessions database.
        ttl: Lifetime granted by every `set` and `touch`. Defaults to
            ``SESSION_TTL_HOURS``.
        clock: Returns the current naive UTC time. Injected for tests.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        ttl: Optional[timedelta] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._session_factory = session_factory
        self.ttl = ttl or timedelta(hours=settings.SESSION_TTL_HOURS)
        self._clock = clock

    @asynccontextmanager
    async def _transaction(self, operation: str, **context: Any) -> AsyncGenerator[AsyncSession, None]:
        """Yields a session and commits it, translating driver errors.

        Raises:
            SessionStoreError: On any SQLAlchemy error, after rolling back.
        """
        async with self._session_factory() as db:
            try:
                yield db
                await db.commit()
            except SQLAlchemyError as e:
                await db.rollback()
                logger.error(
                    "session_store_operation_failed",
                    operation=operation,
                    error=str(e),
                    error_type=type(e).__name__,
                    **context,
                )
                raise SessionStoreError(f"Session store {operation} failed", operation=operation) from e

    @staticmethod
    def _live(session_id: str):
        return and_(
            SessionRecord.session_id == session_id,
            SessionRecord.status == SessionStatus.ACTIVE,
        )

    async def get(self, session_id: str) -> Optional[Dict[str, Any]]:
        now = self._clock()
        masked = mask_session_id(session_id)
        async with self._transaction("get", session_id=masked) as db:
            result = await db.execute(select(SessionRecord).where(self._live(session_id)).limit(1))
            record = result.scalars().first()
            if record is None:
                return None

            if record.is_expired(now):
                record.status = SessionStatus.EXPIRED
                record.updated_at = now
                db.add(record)
                logger.info("session_expired", session_id=masked, expired_at=record.expires_at.isoformat())
                return None

            record.last_accessed_at = now
            record.updated_at = now
            db.add(record)

            data = dict(record.session_data or {})
            data[META_KEY] = {
                "userId": record.user_id,
                "ipAddress": record.ip_address,
                "userAgent": record.user_agent,
                "csrfToken": record.csrf_token,
                "createdAt": record.created_at,
                "lastAccessedAt": record.last_accessed_at,
            }
            return data

    async def set(self, session_id: str, data: Dict[str, Any]) -> None:
        now = self._clock()
        masked = mask_session_id(session_id)
        payload = dict(data or {})
        metadata = payload.pop(META_KEY, None) or {}
        csrf_token = metadata.get("csrfToken") or generate_token()

        async with self._transaction("set", session_id=masked) as db:
            result = await db.execute(
                select(SessionRecord).where(SessionRecord.session_id == session_id).limit(1)
            )
            record = result.scalars().first()
            if record is None:
                record = SessionRecord(
                    session_id=session_id,
                    token=secrets.token_hex(32),
                    created_at=now,
                    expires_at=now + self.ttl,
                )
                logger.info("session_created", session_id=masked, user_id=metadata.get("userId"))

            record.session_data = payload
            record.user_id = metadata.get("userId")
            record.ip_address = metadata.get("ipAddress")
            record.user_agent = metadata.get("userAgent")
            record.csrf_token = csrf_token
            record.status = SessionStatus.ACTIVE
            record.expires_at = now + self.ttl
            record.last_accessed_at = now
            record.updated_at = now
            db.add(record)

    async def touch(self, session_id: str, data: Optional[Dict[str, Any]] = None) -> None:
        now = self._clock()
        async with self._transaction("touch", session_id=mask_session_id(session_id)) as db:
            await db.execute(
                update(SessionRecord)
                .where(self._live(session_id))
                .values(expires_at=now + self.ttl, last_accessed_at=now, updated_at=now)
            )

    async def destroy(self, session_id: str) -> None:
        masked = mask_session_id(session_id)
        async with self._transaction("destroy", session_id=masked) as db:
            await db.execute(
                update(SessionRecord)
                .where(self._live(session_id))
                .values(status=SessionStatus.REVOKED, updated_at=self._clock())
            )
        logger.info("session_destroyed", session_id=masked)

    async def all(self) -> List[Dict[str, Any]]:
        async with self._transaction("all") as db:
            result = await db.execute(
                select(SessionRecord)
                .where(SessionRecord.status == SessionStatus.ACTIVE)
                .order_by(SessionRecord.created_at)
            )
            return [record.to_summary() for record in result.scalars().all()]

    async def length(self) -> int:
        async with self._transaction("length") as db:
            result = await db.execute(
                select(func.count(SessionRecord.id)).where(SessionRecord.status == SessionStatus.ACTIVE)
            )
            return int(result.scalar_one())

    async def clear(self) -> None:
        async with self._transaction("clear") as db:
            result = await db.execute(
                update(SessionRecord)
                .where(SessionRecord.status == SessionStatus.ACTIVE)
                .values(status=SessionStatus.REVOKED, updated_at=self._clock())
            )
            revoked = result.rowcount
        logger.warning("sessions_cleared", revoked=revoked)

    async def invalidate_user_sessions(self, user_id: int) -> int:
        async with self._transaction("invalidate_user_sessions", user_id=user_id) as db:
            result = await db.execute(
                update(SessionRecord)
                .where(
                    and_(
                        SessionRecord.user_id == user_id,
                        SessionRecord.status == SessionStatus.ACTIVE,
                    )
                )
                .values(status=SessionStatus.REVOKED, updated_at=self._clock())
            )
            revoked = result.rowcount
        logger.info("user_sessions_invalidated", user_id=user_id, revoked=revoked)
        return revoked

    async def get_sessions_by_user_id(self, user_id: int) -> List[SessionRecord]:
        async with self._transaction("get_sessions_by_user_id", user_id=user_id) as db:
            result = await db.execute(
                select(SessionRecord)
                .where(
                    and_(
                        SessionRecord.user_id == user_id,
                        SessionRecord.status == SessionStatus.ACTIVE,
                    )
                )
                .order_by(SessionRecord.created_at)
            )
            return list(result.scalars().all())

    async def get_record(self, session_id: str) -> Optional[SessionRecord]:
        async with self._transaction("get_record", session_id=mask_session_id(session_id)) as db:
            result = await db.execute(
                select(SessionRecord).where(SessionRecord.session_id == session_id).limit(1)
            )
            return result.scalars().first()

    async def cleanup_expired(self) -> int:
        now = self._clock()
        async with self._transaction("cleanup_expired") as db:
            result = await db.execute(
                update(SessionRecord)
                .where(
                    and_(
                        SessionRecord.status == SessionStatus.ACTIVE,
                        SessionRecord.expires_at < now,
                    )
                )
                .values(status=SessionStatus.EXPIRED, updated_at=now)
            )
            swept = result.rowcount
        if swept:
            logger.info("expired_sessions_cleaned", count=swept)
        return swept
