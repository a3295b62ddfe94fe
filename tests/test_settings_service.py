"""Tests for ContactSettingsStore: partial updates, block and white lists."""

import pytest

from contacthub.core.errors import SettingsNotFound
from contacthub.models.enums import ContactRole, PrivacyLevel
from contacthub.schemas.settings import ContactSettingsUpdate
from contacthub.services.settings_service import ContactSettingsStore


@pytest.fixture
def settings_store(store) -> ContactSettingsStore:
    return ContactSettingsStore(store)


@pytest.mark.asyncio
async def test_get_returns_none_without_record(settings_store):
    assert await settings_store.get("nobody") is None


@pytest.mark.asyncio
async def test_effective_returns_unsaved_defaults(settings_store, store):
    effective = await settings_store.effective("nobody")

    assert effective.allow_contact_requests is True
    assert effective.allow_direct_messages is True
    assert effective.privacy_level == PrivacyLevel.PRIVATE
    assert all(effective.role_permissions.values())
    assert await store.settings.list() == []


@pytest.mark.asyncio
async def test_first_upsert_creates_with_defaults(settings_store):
    settings = await settings_store.upsert(
        "mentor-1", ContactSettingsUpdate(allow_direct_messages=False)
    )

    assert settings.allow_direct_messages is False
    assert settings.allow_contact_requests is True
    assert settings.allow_meeting_requests is True
    assert settings.timezone == "UTC"
    assert settings.blocked_users == []
    assert settings.role_permissions == {"investor": True, "mentor": True, "startup": True, "student": True}


@pytest.mark.asyncio
async def test_upsert_only_changes_given_fields(settings_store):
    await settings_store.upsert(
        "mentor-1",
        ContactSettingsUpdate(timezone="Asia/Kolkata", auto_response="Back on Monday")
    )
    await settings_store.upsert("mentor-1", ContactSettingsUpdate(allow_contact_requests=False))

    settings = await settings_store.get("mentor-1")
    assert settings.allow_contact_requests is False
    assert settings.timezone == "Asia/Kolkata"
    assert settings.auto_response == "Back on Monday"
    assert settings.allow_direct_messages is True


@pytest.mark.asyncio
async def test_upsert_keeps_single_record_per_user(settings_store, store):
    await settings_store.upsert("mentor-1", ContactSettingsUpdate(timezone="UTC"))
    await settings_store.upsert("mentor-1", ContactSettingsUpdate(timezone="Europe/Berlin"))

    assert len(await store.settings.list(user_id="mentor-1")) == 1


@pytest.mark.asyncio
async def test_role_permissions_merge_key_by_key(settings_store):
    await settings_store.upsert(
        "mentor-1", ContactSettingsUpdate(role_permissions={ContactRole.INVESTOR: False})
    )
    settings = await settings_store.upsert(
        "mentor-1", ContactSettingsUpdate(role_permissions={ContactRole.STUDENT: False})
    )

    assert settings.role_permissions == {
        "investor": False,
        "mentor": True,
        "startup": True,
        "student": False,
    }
    assert settings.allows_role("investor") is False
    assert settings.allows_role("startup") is True
    assert settings.allows_role("admin") is True


@pytest.mark.asyncio
async def test_explicit_null_does_not_clear_required_field(settings_store):
    await settings_store.upsert("mentor-1", ContactSettingsUpdate(allow_direct_messages=False))
    settings = await settings_store.upsert(
        "mentor-1", ContactSettingsUpdate(allow_direct_messages=None, auto_response=None)
    )

    assert settings.allow_direct_messages is False
    assert settings.auto_response is None


@pytest.mark.asyncio
async def test_block_requires_settings(settings_store):
    with pytest.raises(SettingsNotFound):
        await settings_store.block("mentor-1", "student-1")

    with pytest.raises(SettingsNotFound):
        await settings_store.unblock("mentor-1", "student-1")


@pytest.mark.asyncio
async def test_block_and_unblock_are_idempotent(settings_store):
    await settings_store.upsert("mentor-1", ContactSettingsUpdate())

    await settings_store.block("mentor-1", "student-1")
    settings = await settings_store.block("mentor-1", "student-1")
    assert settings.blocked_users == ["student-1"]

    await settings_store.unblock("mentor-1", "student-1")
    settings = await settings_store.unblock("mentor-1", "student-1")
    assert settings.blocked_users == []


@pytest.mark.asyncio
async def test_blocked_users_listing(settings_store):
    assert await settings_store.blocked_users("mentor-1") == []

    await settings_store.upsert("mentor-1", ContactSettingsUpdate(blocked_users=["a", "b", "a"]))

    assert await settings_store.blocked_users("mentor-1") == ["a", "b"]


@pytest.mark.asyncio
async def test_whitelist_and_unwhitelist(settings_store):
    await settings_store.upsert("mentor-1", ContactSettingsUpdate())

    await settings_store.whitelist("mentor-1", "investor-1")
    settings = await settings_store.whitelist("mentor-1", "investor-1")
    assert settings.whitelisted_users == ["investor-1"]

    settings = await settings_store.unwhitelist("mentor-1", "investor-1")
    assert settings.whitelisted_users == []
