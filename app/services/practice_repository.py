"""Read access to practice data for the analysis pipeline."""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.database_models import PROFILE_SINGLETON_ID, PracticeSession, UserProfile
from app.models.schemas import ProfileRead, SessionRead
from app.services.errors import ProfileFetchError


logger = logging.getLogger(__name__)


class PracticeRepository:
    """Fetches sessions and the profile; never writes."""

    def __init__(self, db: Session):
        self.db = db

    def fetch_recent_sessions(self, limit: int) -> list[SessionRead]:
        """Return up to ``limit`` sessions, most recent first."""

        stmt = (
            select(PracticeSession)
            .order_by(PracticeSession.created_at.desc(), PracticeSession.id.desc())
            .limit(limit)
        )
        rows = self.db.scalars(stmt).all()
        logger.debug("Fetched %d session(s) for analysis (limit=%d)", len(rows), limit)
        return [SessionRead.model_validate(row) for row in rows]

    def fetch_profile(self) -> ProfileRead | None:
        """Return the profile, or ``None`` when it has not been set up."""

        try:
            row = self.db.get(UserProfile, PROFILE_SINGLETON_ID)
        except SQLAlchemyError as exc:
            raise ProfileFetchError(f"Could not load profile: {exc}") from exc
        return ProfileRead.model_validate(row) if row is not None else None
