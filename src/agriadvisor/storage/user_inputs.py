"""Farm-profile history queries — one INSERT, one SELECT."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from agriadvisor.core.errors import PersistenceError
from agriadvisor.core.types import FarmProfile
from agriadvisor.storage.models import UserInput

logger = logging.getLogger(__name__)


async def save_user_input(session: AsyncSession, profile: FarmProfile) -> int:
    """Persist a farm profile and return its row id."""
    row = UserInput(
        user_id=profile.user_id,
        location=profile.location,
        land_size=profile.land_size,
        land_type=profile.land_type,
        land_health=profile.land_health,
        season=profile.season,
        water_facility=profile.water_facility,
        duration=profile.duration,
        language=profile.language,
    )
    try:
        session.add(row)
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error("Failed to save user input: %s", e)
        raise PersistenceError("Failed to save user input", details=str(e)) from e

    logger.info("Saved user input %d", row.id, extra={"user_id": profile.user_id})
    return row.id


async def list_user_inputs(session: AsyncSession, user_id: str) -> list[dict]:
    """All profiles submitted under `user_id`, most recent first."""
    stmt = (
        select(UserInput)
        .where(UserInput.user_id == user_id)
        .order_by(UserInput.created_at.desc(), UserInput.id.desc())
    )
    try:
        result = await session.execute(stmt)
    except SQLAlchemyError as e:
        logger.error("Failed to fetch user inputs: %s", e)
        raise PersistenceError("Failed to fetch user inputs", details=str(e)) from e
    return [row.to_dict() for row in result.scalars()]
