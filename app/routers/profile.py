"""Guitarist profile endpoints (single row)."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.database_models import PROFILE_SINGLETON_ID, UserProfile
from app.models.schemas import ProfileInput, ProfileRead


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/profile", tags=["profile"])


def _serialize(row: UserProfile) -> dict:
    return ProfileRead.model_validate(row).model_dump(mode="json", by_alias=True)


@router.get("")
async def get_profile(db: Session = Depends(get_db)) -> dict:
    """Return the profile, or ``profile: null`` when none was saved yet."""

    row = db.get(UserProfile, PROFILE_SINGLETON_ID)
    return {"success": True, "profile": _serialize(row) if row is not None else None}


@router.post("")
async def save_profile(payload: ProfileInput, db: Session = Depends(get_db)) -> dict:
    """Create or replace the profile."""

    row = db.get(UserProfile, PROFILE_SINGLETON_ID)
    if row is None:
        row = UserProfile(id=PROFILE_SINGLETON_ID)
        db.add(row)

    row.level = payload.level.value
    row.experience_value = payload.experience_value
    row.experience_unit = payload.experience_unit.value
    row.main_goal = payload.main_goal
    row.current_challenge = payload.current_challenge
    row.ideal_practice_frequency = payload.ideal_practice_frequency
    row.priority_techniques = payload.priority_techniques
    row.additional_context = payload.additional_context

    db.commit()
    db.refresh(row)
    logger.info("Profile saved | level=%s", row.level)

    return {"success": True, "profile": _serialize(row), "message": "Perfil guardado exitosamente"}
