"""
Contact settings service - privacy flags, block list and white list.
"""

import logging
from typing import Optional, List, Dict, Any

from contacthub.core.errors import SettingsNotFound
from contacthub.models.contact_settings import ContactSettings, default_role_permissions
from contacthub.models.enums import PrivacyLevel
from contacthub.repositories.store import ContactStore
from contacthub.schemas.settings import ContactSettingsUpdate

logger = logging.getLogger(__name__)


def default_settings(user_id: str) -> ContactSettings:
    """Permissive defaults used on first write and when no record exists."""
    return ContactSettings(
        user_id=user_id,
        allow_contact_requests=True,
        allow_direct_messages=True,
        allow_meeting_requests=True,
        role_permissions=default_role_permissions(),
        privacy_level=PrivacyLevel.PRIVATE,
        blocked_users=[],
        whitelisted_users=[],
        contact_preferences={},
        notification_settings={},
        business_hours=None,
        auto_response=None,
        timezone="UTC",
    )


class ContactSettingsStore:
    """
    Owns ContactSettings records: exactly one per user, created lazily.
    """

    def __init__(self, store: ContactStore):
        self.store = store

    async def get(self, user_id: str) -> Optional[ContactSettings]:
        """Stored settings, or None (callers then assume the defaults)."""
        rows = await self.store.settings.list(user_id=user_id)
        return rows[0] if rows else None

    async def effective(self, user_id: str) -> ContactSettings:
        """Stored settings or an unsaved default record."""
        settings = await self.get(user_id)
        return settings if settings is not None else default_settings(user_id)

    async def upsert(self, user_id: str, update: ContactSettingsUpdate) -> ContactSettings:
        """
        Apply only the fields present in ``update``.

        Creates the record with defaults first if the user has none yet.
        """
        changes: Dict[str, Any] = update.model_dump(exclude_unset=True)

        if "role_permissions" in changes:
            role_changes = {role.value: allowed for role, allowed in (changes["role_permissions"] or {}).items()}
        else:
            role_changes = None
        changes.pop("role_permissions", None)

        for list_field in ("blocked_users", "whitelisted_users"):
            if changes.get(list_field) is not None:
                changes[list_field] = _unique(changes[list_field])

        # Required columns cannot be cleared with an explicit null
        for field in list(changes):
            if changes[field] is None and field not in ("business_hours", "auto_response", "user_name", "user_email", "user_role"):
                changes.pop(field)

        existing = await self.get(user_id)

        if existing is None:
            settings = default_settings(user_id)
            for field, value in changes.items():
                setattr(settings, field, value)
            if role_changes:
                settings.role_permissions = {**settings.role_permissions, **role_changes}
            settings = await self.store.settings.create(settings)
            logger.info(f"Contact settings created for user {user_id}")
            return settings

        if role_changes:
            changes["role_permissions"] = {**(existing.role_permissions or {}), **role_changes}

        settings = await self.store.settings.update(existing.id, **changes)
        logger.info(f"Contact settings updated for user {user_id}: {sorted(changes)}")
        return settings

    async def block(self, user_id: str, target_id: str) -> ContactSettings:
        """Add target_id to the block list (no-op if already blocked)."""
        settings = await self._require(user_id)
        blocked = list(settings.blocked_users or [])
        if target_id in blocked:
            return settings

        blocked.append(target_id)
        logger.info(f"User {user_id} blocked {target_id}")
        return await self.store.settings.update(settings.id, blocked_users=blocked)

    async def unblock(self, user_id: str, target_id: str) -> ContactSettings:
        """Remove target_id from the block list (no-op if not blocked)."""
        settings = await self._require(user_id)
        blocked = list(settings.blocked_users or [])
        if target_id not in blocked:
            return settings

        logger.info(f"User {user_id} unblocked {target_id}")
        return await self.store.settings.update(
            settings.id,
            blocked_users=[uid for uid in blocked if uid != target_id]
        )

    async def whitelist(self, user_id: str, target_id: str) -> ContactSettings:
        settings = await self._require(user_id)
        allowed = list(settings.whitelisted_users or [])
        if target_id in allowed:
            return settings

        allowed.append(target_id)
        return await self.store.settings.update(settings.id, whitelisted_users=allowed)

    async def unwhitelist(self, user_id: str, target_id: str) -> ContactSettings:
        settings = await self._require(user_id)
        allowed = list(settings.whitelisted_users or [])
        if target_id not in allowed:
            return settings

        return await self.store.settings.update(
            settings.id,
            whitelisted_users=[uid for uid in allowed if uid != target_id]
        )

    async def blocked_users(self, user_id: str) -> List[str]:
        settings = await self.get(user_id)
        return list(settings.blocked_users or []) if settings else []

    async def _require(self, user_id: str) -> ContactSettings:
        # Blocking never auto-creates settings
        settings = await self.get(user_id)
        if settings is None:
            raise SettingsNotFound(f"Contact settings not found for user {user_id}")
        return settings


def _unique(values: List[str]) -> List[str]:
    return list(dict.fromkeys(values))
