"""
Interaction Service - interested / passed sets kept per owner profile

Each (owner, target, kind) is a single row, so adding is a set union and
re-sending is a no-op. The two sets are independent: passing on a profile
does not withdraw interest in it, and sending interest does not undo a pass.
"""
import logging
from typing import List

from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.database.models import Profile, ProfileInteraction
from app.models.interactions import InteractionKind

logger = logging.getLogger(__name__)


class InteractionService:
    """Service class for interest and pass signalling"""

    async def _add_member(self, db: AsyncSession, owner_id: str, target_id: str, kind: InteractionKind) -> bool:
        """Add target to the owner's set; returns False when it was already a member"""
        existing = await db.scalar(
            select(ProfileInteraction.id).where(
                ProfileInteraction.owner_profile_id == owner_id,
                ProfileInteraction.target_profile_id == target_id,
                ProfileInteraction.kind == kind.value
            )
        )
        if existing is not None:
            return False

        db.add(ProfileInteraction(owner_profile_id=owner_id, target_profile_id=target_id, kind=kind.value))
        try:
            await db.commit()
        except IntegrityError:
            # A concurrent request added the same member
            await db.rollback()
            return False
        return True

    async def _list_members(self, db: AsyncSession, owner_id: str, kind: InteractionKind) -> List[Profile]:
        """Resolve the owner's set to verified profiles; stale targets are dropped"""
        result = await db.execute(
            select(Profile)
            .join(ProfileInteraction, ProfileInteraction.target_profile_id == Profile.profile_id)
            .where(
                ProfileInteraction.owner_profile_id == owner_id,
                ProfileInteraction.kind == kind.value,
                Profile.otp_verified.is_(True)
            )
            .order_by(ProfileInteraction.created_at, ProfileInteraction.id)
        )
        return list(result.scalars().all())

    # =========================================================================
    # INTERESTS
    # =========================================================================

    async def send_interest(self, db: AsyncSession, from_id: str, to_id: str) -> bool:
        target = await db.scalar(
            select(Profile.id).where(Profile.profile_id == to_id, Profile.otp_verified.is_(True))
        )
        if target is None:
            logger.warning(f"Profile not found: interestedProfileId={to_id}")
            raise NotFoundError("Interested profile not found", code="target_not_found")

        added = await self._add_member(db, from_id, to_id, InteractionKind.INTERESTED)
        logger.info(f"Interest stored: userProfileId={from_id}, interestedProfileId={to_id} (new={added})")
        return added

    async def remove_interest(self, db: AsyncSession, from_id: str, to_id: str) -> None:
        result = await db.execute(
            delete(ProfileInteraction).where(
                ProfileInteraction.owner_profile_id == from_id,
                ProfileInteraction.target_profile_id == to_id,
                ProfileInteraction.kind == InteractionKind.INTERESTED.value
            )
        )
        removed = result.rowcount
        await db.commit()

        if removed == 0:
            logger.warning(f"No interest found to delete: userProfileId={from_id}, interestedProfileId={to_id}")
            raise NotFoundError("Interest not found", code="interest_not_found")

        logger.info(f"Interest removed: userProfileId={from_id}, interestedProfileId={to_id}")

    async def remove_all_interests(self, db: AsyncSession, from_id: str) -> int:
        result = await db.execute(
            delete(ProfileInteraction).where(
                ProfileInteraction.owner_profile_id == from_id,
                ProfileInteraction.kind == InteractionKind.INTERESTED.value
            )
        )
        removed = result.rowcount
        await db.commit()
        logger.info(f"Removed all interests for userProfileId={from_id} ({removed} entries)")
        return removed

    async def list_interested(self, db: AsyncSession, owner_id: str) -> List[Profile]:
        profiles = await self._list_members(db, owner_id, InteractionKind.INTERESTED)
        logger.info(f"Fetched {len(profiles)} interested profiles for userProfileId={owner_id}")
        return profiles

    # =========================================================================
    # PASSES
    # =========================================================================

    async def pass_profile(self, db: AsyncSession, from_id: str, to_id: str) -> bool:
        target = await db.scalar(select(Profile.id).where(Profile.profile_id == to_id))
        if target is None:
            logger.warning(f"Profile not found: passedProfileId={to_id}")
            raise NotFoundError("Passed profile not found", code="target_not_found")

        added = await self._add_member(db, from_id, to_id, InteractionKind.PASSED)
        logger.info(f"Pass stored: userProfileId={from_id}, passedProfileId={to_id} (new={added})")
        return added

    async def list_passed(self, db: AsyncSession, owner_id: str) -> List[Profile]:
        profiles = await self._list_members(db, owner_id, InteractionKind.PASSED)
        logger.info(f"Fetched {len(profiles)} passed profiles for userProfileId={owner_id}")
        return profiles


interaction_service = InteractionService()
