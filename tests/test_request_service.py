"""Tests for ContactRequestManager: permission checks, lifecycle and listing."""

from datetime import timedelta
import uuid

import pytest

from contacthub.core.errors import (
    ContactRequestsDisabled,
    InvalidStateTransition,
    MeetingRequestsDisabled,
    NotFound,
    PermissionDenied,
    RoleContactDisabled,
    SenderBlocked,
)
from contacthub.database import utcnow
from contacthub.models.contact import ContactRequest, RequestStatus, RequestType
from contacthub.models.enums import Category, ContactRole, Priority
from contacthub.models.notification import NotificationType
from contacthub.schemas.contact import ContactRequestCreate, ContactRequestFilters
from contacthub.schemas.settings import ContactSettingsUpdate
from tests.helpers import INVESTOR, MENTOR, STUDENT


def make_request(requester=STUDENT, target=MENTOR, **overrides) -> ContactRequestCreate:
    data = {
        "requester": requester,
        "target": target,
        "subject": "Mentorship",
        "message": "Could you review my pitch deck?",
    }
    data.update(overrides)
    return ContactRequestCreate(**data)


async def seed_request(store, created_at, priority=Priority.MEDIUM, status=RequestStatus.PENDING, **fields):
    values = dict(
        requester_id=STUDENT.id,
        requester_name=STUDENT.name,
        requester_email=STUDENT.email,
        requester_role=STUDENT.role,
        target_id=MENTOR.id,
        target_name=MENTOR.name,
        target_email=MENTOR.email,
        target_role=MENTOR.role,
        request_type=RequestType.GENERAL_INQUIRY,
        subject="Hello",
        message="Hi there",
        status=status,
        priority=priority,
        category=Category.OTHER,
        created_at=created_at,
    )
    values.update(fields)
    return await store.requests.create(ContactRequest(**values))


# ── send ─────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_send_without_target_settings_uses_defaults(service, store):
    request = await service.requests.send(make_request())

    assert request.status == RequestStatus.PENDING
    assert request.requester_id == STUDENT.id
    assert request.target_id == MENTOR.id
    assert await store.requests.get(request.id) is request


@pytest.mark.asyncio
async def test_send_notifies_target(service, publisher):
    request = await service.requests.send(make_request())

    notifications = await service.notifications.list(MENTOR.id)
    assert len(notifications) == 1
    notification = notifications[0]
    assert notification.notification_type == NotificationType.NEW_CONTACT_REQUEST
    assert notification.title == "New Contact Request"
    assert notification.message == f"{STUDENT.name} sent you a contact request"
    assert notification.action_required is True
    assert notification.action_url == f"/contacts/requests/{request.id}"
    assert notification.related_id == str(request.id)

    assert publisher.sent[0][0] == MENTOR.id
    assert publisher.sent[0][1]["type"] == "notification"


@pytest.mark.asyncio
async def test_send_to_self_rejected(service):
    with pytest.raises(PermissionDenied):
        await service.requests.send(make_request(requester=MENTOR, target=MENTOR))


@pytest.mark.asyncio
async def test_send_fails_when_requests_disabled(service, store):
    await service.settings.upsert(MENTOR.id, ContactSettingsUpdate(allow_contact_requests=False))

    with pytest.raises(ContactRequestsDisabled) as exc_info:
        await service.requests.send(make_request())

    assert isinstance(exc_info.value, PermissionDenied)
    assert await store.requests.list() == []
    assert await store.notifications.list() == []


@pytest.mark.asyncio
async def test_blocked_requester_gets_sender_blocked(service, store):
    await service.settings.upsert(MENTOR.id, ContactSettingsUpdate())
    await service.settings.block(MENTOR.id, STUDENT.id)

    with pytest.raises(SenderBlocked):
        await service.requests.send(make_request())

    assert await store.requests.list() == []


@pytest.mark.asyncio
async def test_meeting_request_respects_flag(service):
    await service.settings.upsert(MENTOR.id, ContactSettingsUpdate(allow_meeting_requests=False))

    with pytest.raises(MeetingRequestsDisabled):
        await service.requests.send(make_request(request_type=RequestType.MEETING_REQUEST))

    request = await service.requests.send(make_request(request_type=RequestType.MENTORSHIP_REQUEST))
    assert request.status == RequestStatus.PENDING


@pytest.mark.asyncio
async def test_role_permission_blocks_role(service):
    await service.settings.upsert(
        MENTOR.id, ContactSettingsUpdate(role_permissions={ContactRole.INVESTOR: False})
    )

    with pytest.raises(RoleContactDisabled):
        await service.requests.send(make_request(requester=INVESTOR))

    # Other roles are unaffected
    await service.requests.send(make_request(requester=STUDENT))


@pytest.mark.asyncio
async def test_whitelisted_requester_bypasses_role_check_but_not_block(service):
    await service.settings.upsert(
        MENTOR.id,
        ContactSettingsUpdate(role_permissions={ContactRole.INVESTOR: False}, allow_meeting_requests=False)
    )
    await service.settings.whitelist(MENTOR.id, INVESTOR.id)

    request = await service.requests.send(
        make_request(requester=INVESTOR, request_type=RequestType.MEETING_REQUEST)
    )
    assert request.status == RequestStatus.PENDING

    await service.settings.block(MENTOR.id, INVESTOR.id)
    with pytest.raises(SenderBlocked):
        await service.requests.send(make_request(requester=INVESTOR))


@pytest.mark.asyncio
async def test_notification_failure_does_not_fail_send(service, store, monkeypatch):
    async def broken_create(entity):
        raise RuntimeError("inbox unavailable")

    monkeypatch.setattr(store.notifications, "create", broken_create)

    request = await service.requests.send(make_request())

    assert request.status == RequestStatus.PENDING


# ── respond ──────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_approve_sets_response_fields_and_notifies(service):
    request = await service.requests.send(make_request())

    approved = await service.requests.respond(
        request.id, MENTOR.id, RequestStatus.APPROVED, "Happy to help"
    )

    assert approved.status == RequestStatus.APPROVED
    assert approved.responded_by == MENTOR.id
    assert approved.responded_at is not None
    assert approved.response_message == "Happy to help"

    notifications = await service.notifications.list(STUDENT.id)
    assert [n.notification_type for n in notifications] == [NotificationType.CONTACT_APPROVED]


@pytest.mark.asyncio
async def test_reject_notifies_requester(service):
    request = await service.requests.send(make_request())

    await service.requests.respond(request.id, MENTOR.id, RequestStatus.REJECTED)

    notifications = await service.notifications.list(STUDENT.id)
    assert notifications[0].notification_type == NotificationType.CONTACT_REJECTED


@pytest.mark.asyncio
@pytest.mark.parametrize("first", [RequestStatus.APPROVED, RequestStatus.REJECTED])
async def test_second_response_is_invalid_and_keeps_status(service, store, first):
    request = await service.requests.send(make_request())
    await service.requests.respond(request.id, MENTOR.id, first)

    with pytest.raises(InvalidStateTransition):
        await service.requests.respond(request.id, MENTOR.id, RequestStatus.APPROVED)
    with pytest.raises(InvalidStateTransition):
        await service.requests.respond(request.id, MENTOR.id, RequestStatus.REJECTED)

    stored = await store.requests.get(request.id)
    assert stored.status == first


@pytest.mark.asyncio
async def test_respond_unknown_request(service):
    with pytest.raises(NotFound):
        await service.requests.respond(uuid.uuid4(), MENTOR.id, RequestStatus.APPROVED)


@pytest.mark.asyncio
async def test_only_target_can_respond(service):
    request = await service.requests.send(make_request())

    with pytest.raises(PermissionDenied):
        await service.requests.respond(request.id, STUDENT.id, RequestStatus.APPROVED)


@pytest.mark.asyncio
async def test_respond_with_non_terminal_status_rejected(service):
    request = await service.requests.send(make_request())

    with pytest.raises(InvalidStateTransition):
        await service.requests.respond(request.id, MENTOR.id, RequestStatus.EXPIRED)


# ── cancel / complete / expire ───────────────────────────────────────────


@pytest.mark.asyncio
async def test_cancel_by_requester_only(service):
    request = await service.requests.send(make_request())

    with pytest.raises(PermissionDenied):
        await service.requests.cancel(request.id, MENTOR.id)

    cancelled = await service.requests.cancel(request.id, STUDENT.id)
    assert cancelled.status == RequestStatus.CANCELLED

    with pytest.raises(InvalidStateTransition):
        await service.requests.cancel(request.id, STUDENT.id)


@pytest.mark.asyncio
async def test_complete_requires_approval(service):
    request = await service.requests.send(make_request())

    with pytest.raises(InvalidStateTransition):
        await service.requests.complete(request.id, STUDENT.id)

    await service.requests.respond(request.id, MENTOR.id, RequestStatus.APPROVED)

    with pytest.raises(PermissionDenied):
        await service.requests.complete(request.id, INVESTOR.id)

    completed = await service.requests.complete(request.id, STUDENT.id)
    assert completed.status == RequestStatus.COMPLETED


@pytest.mark.asyncio
async def test_expire_stale_only_touches_old_pending(service, store):
    now = utcnow()
    old = await seed_request(store, now - timedelta(days=45))
    recent = await seed_request(store, now - timedelta(days=2))
    old_approved = await seed_request(store, now - timedelta(days=60), status=RequestStatus.APPROVED)

    expired = await service.requests.expire_stale(now - timedelta(days=30))

    assert expired == 1
    assert (await store.requests.get(old.id)).status == RequestStatus.EXPIRED
    assert (await store.requests.get(recent.id)).status == RequestStatus.PENDING
    assert (await store.requests.get(old_approved.id)).status == RequestStatus.APPROVED


# ── list ─────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_list_sorts_by_priority_then_newest(service, store):
    now = utcnow()
    low = await seed_request(store, now - timedelta(hours=1), Priority.LOW)
    urgent_old = await seed_request(store, now - timedelta(hours=5), Priority.URGENT)
    urgent_new = await seed_request(store, now - timedelta(hours=2), Priority.URGENT)
    medium = await seed_request(store, now, Priority.MEDIUM)
    high = await seed_request(store, now - timedelta(hours=3), Priority.HIGH)
    await seed_request(store, now, Priority.URGENT, status=RequestStatus.APPROVED)

    requests = await service.requests.list(
        MENTOR.id, ContactRequestFilters(status=[RequestStatus.PENDING])
    )

    assert [r.id for r in requests] == [urgent_new.id, urgent_old.id, high.id, medium.id, low.id]
    assert all(r.status == RequestStatus.PENDING for r in requests)


@pytest.mark.asyncio
async def test_list_only_returns_requests_for_target(service, store):
    now = utcnow()
    mine = await seed_request(store, now)
    await seed_request(store, now, target_id=INVESTOR.id, target_name=INVESTOR.name)

    requests = await service.requests.list(MENTOR.id)

    assert [r.id for r in requests] == [mine.id]


@pytest.mark.asyncio
async def test_list_search_is_case_insensitive(service, store):
    now = utcnow()
    by_subject = await seed_request(store, now, subject="Seed ROUND")
    by_message = await seed_request(store, now - timedelta(minutes=1), message="about our round")
    by_name = await seed_request(store, now - timedelta(minutes=2), requester_name="Roundtree")
    await seed_request(store, now - timedelta(minutes=3), subject="Other")

    requests = await service.requests.list(MENTOR.id, ContactRequestFilters(search_term="round"))

    assert {r.id for r in requests} == {by_subject.id, by_message.id, by_name.id}


@pytest.mark.asyncio
async def test_list_filters_by_category_type_and_dates(service, store):
    now = utcnow()
    match = await seed_request(
        store, now - timedelta(days=1),
        category=Category.INVESTMENT, request_type=RequestType.INVESTMENT_INQUIRY
    )
    await seed_request(
        store, now - timedelta(days=10),
        category=Category.INVESTMENT, request_type=RequestType.INVESTMENT_INQUIRY
    )
    await seed_request(store, now - timedelta(days=1), category=Category.TECHNICAL)

    requests = await service.requests.list(
        MENTOR.id,
        ContactRequestFilters(
            category=[Category.INVESTMENT],
            request_type=[RequestType.INVESTMENT_INQUIRY],
            date_from=now - timedelta(days=3),
            date_to=now,
        )
    )

    assert [r.id for r in requests] == [match.id]


@pytest.mark.asyncio
async def test_list_sent_newest_first(service, store):
    now = utcnow()
    older = await seed_request(store, now - timedelta(days=1))
    newer = await seed_request(store, now)

    requests = await service.requests.list_sent(STUDENT.id)

    assert [r.id for r in requests] == [newer.id, older.id]
