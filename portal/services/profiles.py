from typing import Any, Optional

from portal.errors import ValidationError
from portal.models.profile import PROFILE_FIELDS, ParticipationType, UserProfile
from portal.services.base import Lifecycle, new_id
from portal.services.gateway import USER_PROFILES
from portal.services.session import Session
from portal.utils.clock import iso
from portal.utils.logger import get_logger
from portal.utils.validation import coerce_enum


logger = get_logger("profiles")


def clean_profile_fields(fields: dict[str, Any]) -> dict[str, str]:
    unknown = sorted(set(fields) - set(PROFILE_FIELDS))
    if unknown:
        raise ValidationError(f"Unknown profile fields: {', '.join(unknown)}")
    cleaned = {k: ("" if v is None else str(v).strip()) for k, v in fields.items()}
    if cleaned.get("participation_type"):
        cleaned["participation_type"] = coerce_enum(
            ParticipationType, cleaned["participation_type"], "participation_type"
        ).value
    return cleaned


class ProfileService(Lifecycle):
    """One profile per user, written with list-then-create-or-update semantics."""

    def get_for_owner(self, session: Session, owner_id: Optional[str] = None) -> Optional[UserProfile]:
        owner_id = owner_id or session.require_user().id
        session.require_owner_or_admin(owner_id)
        rows = self.gateway.list(USER_PROFILES, filters={"user_id": owner_id}, limit=1)
        return UserProfile.model_validate(rows[0]) if rows else None

    def save(self, session: Session, fields: dict[str, Any]) -> UserProfile:
        owner = session.require_user()
        cleaned = clean_profile_fields(fields)
        now = self.clock()

        existing = self.get_for_owner(session, owner.id)
        if existing is not None:
            patch = {**cleaned, "user_id": owner.id, "updated_at": iso(now)}
            profile = UserProfile.model_validate(self.gateway.update(USER_PROFILES, existing.id, patch))
            logger.info("Profile %s updated for %s", profile.id, owner.id)
        else:
            record = UserProfile(id=new_id(), user_id=owner.id, created_at=now, updated_at=now, **cleaned)
            profile = UserProfile.model_validate(self.gateway.create(USER_PROFILES, record.to_record()))
            logger.info("Profile %s created for %s", profile.id, owner.id)
        session.emit("profile.saved", id=profile.id)
        return profile

    def list_all(self, session: Session) -> list[UserProfile]:
        session.require_admin("list users")
        rows = self.gateway.list(USER_PROFILES, sort={"created_at": -1})
        return [UserProfile.model_validate(r) for r in rows]

    def remove(self, session: Session, profile_id: str, confirm: bool = False) -> None:
        admin = session.require_admin("delete users")
        if not confirm:
            raise ValidationError("Deleting a user profile cannot be undone; confirm the deletion to proceed")
        self.gateway.delete(USER_PROFILES, profile_id)
        logger.info("Profile %s deleted by %s", profile_id, admin.id)
        session.emit("profile.removed", id=profile_id)
