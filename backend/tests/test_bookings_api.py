import asyncio
import time

from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from conftest import FailingMailer
from hotel_api.core.config import settings
from hotel_api.db import crud_bookings
from hotel_api.db.models import Booking
from hotel_api.services.mailer import Mailer, get_mailer
from hotel_api.main import app


def booking_payload(room_id, **overrides):
    data = {
        "room_id": room_id,
        "check_in": "2024-03-01",
        "check_out": "2024-03-04",
        "max_number_of_adults": 2,
        "user_email": "Guest.Person@Example.com",
        "first_name": "Guest",
        "last_name": "Person",
        "payment_status": "pay-at-hotel",
    }
    data.update(overrides)
    return data


async def count_bookings(session_factory):
    async with session_factory() as s:
        return (await s.execute(select(func.count(Booking.id)))).scalar_one()


async def test_create_booking_prices_stay_and_sends_both_emails(client, room, mailer):
    res = await client.post("/api/bookings", json=booking_payload(room.id))

    assert res.status_code == 201
    body = res.json()
    assert body["message"] == "Booking created and confirmation emails sent"
    booking = body["booking"]
    assert booking["total_price"] == 300.0
    assert booking["status"] == "pending"
    assert booking["payment_status"] == "pay-at-hotel"
    assert booking["user_email"] == "guest.person@example.com"
    assert booking["user_id"] is None
    assert booking["id"]

    assert len(mailer.sent) == 2
    by_to = {m["to"]: m for m in mailer.sent}
    guest = by_to["guest.person@example.com"]
    admin = by_to["frontdesk@example.com"]
    assert guest["subject"] == "Booking Confirmation"
    assert admin["subject"] == "New Booking Alert"
    assert "Dear Guest," in guest["html"]
    assert "HELLO ADMIN" in admin["html"]
    for m in (guest, admin):
        assert len(m["attachments"]) == 1
        att = m["attachments"][0]
        assert att.filename == f"receipt-{booking['id']}.pdf"
        assert att.content.startswith(b"%PDF")


async def test_client_supplied_price_is_ignored(client, room):
    res = await client.post(
        "/api/bookings", json=booking_payload(room.id, total_price=1, totalPrice=1)
    )
    assert res.status_code == 201
    assert res.json()["booking"]["total_price"] == 300.0


async def test_equal_dates_rejected_without_side_effects(client, room, mailer, session_factory):
    res = await client.post(
        "/api/bookings",
        json=booking_payload(room.id, check_in="2024-03-01", check_out="2024-03-01"),
    )
    assert res.status_code == 400
    assert res.json()["detail"] == "Check-out date must be after check-in date"
    assert mailer.sent == []
    assert await count_bookings(session_factory) == 0


async def test_checkout_before_checkin_rejected(client, room, mailer, session_factory):
    res = await client.post(
        "/api/bookings",
        json=booking_payload(room.id, check_in="2024-03-05", check_out="2024-03-01"),
    )
    assert res.status_code == 400
    assert mailer.sent == []
    assert await count_bookings(session_factory) == 0


async def test_unknown_room_is_not_found(client, mailer, session_factory):
    res = await client.post("/api/bookings", json=booking_payload(9999))
    assert res.status_code == 404
    assert res.json()["detail"] == "Room not found"
    assert mailer.sent == []
    assert await count_bookings(session_factory) == 0


async def test_missing_required_fields_are_400(client, room, mailer, session_factory):
    payload = booking_payload(room.id)
    del payload["first_name"]
    del payload["user_email"]

    res = await client.post("/api/bookings", json=payload)

    assert res.status_code == 400
    body = res.json()
    assert body["detail"] == "Missing or invalid fields"
    assert "first_name" in body["fields"]
    assert "user_email" in body["fields"]
    assert mailer.sent == []
    assert await count_bookings(session_factory) == 0


async def test_invalid_party_size_and_payment_status(client, room):
    res = await client.post("/api/bookings", json=booking_payload(room.id, max_number_of_adults=0))
    assert res.status_code == 400
    assert "max_number_of_adults" in res.json()["fields"]

    res = await client.post("/api/bookings", json=booking_payload(room.id, payment_status="card"))
    assert res.status_code == 400
    assert "payment_status" in res.json()["fields"]


async def test_iso_timestamps_round_nights_half_up(client, room):
    res = await client.post(
        "/api/bookings",
        json=booking_payload(
            room.id, check_in="2024-02-29T18:30:00.000Z", check_out="2024-03-02T06:30:00.000Z"
        ),
    )

    assert res.status_code == 201
    booking = res.json()["booking"]
    # 1.5 days rounds up to two nights
    assert booking["total_price"] == 200.0
    assert booking["check_in"] == "2024-02-29T18:30:00"
    assert booking["check_out"] == "2024-03-02T06:30:00"


async def test_offset_timestamps_are_stored_as_utc(client, room):
    res = await client.post(
        "/api/bookings",
        json=booking_payload(
            room.id, check_in="2024-03-01T02:00:00+02:00", check_out="2024-03-03T23:00:00-01:00"
        ),
    )

    assert res.status_code == 201
    booking = res.json()["booking"]
    assert booking["check_in"] == "2024-03-01T00:00:00"
    assert booking["check_out"] == "2024-03-04T00:00:00"
    assert booking["total_price"] == 300.0


async def test_stay_shorter_than_half_a_day_rejected(client, room, mailer, session_factory):
    res = await client.post(
        "/api/bookings",
        json=booking_payload(
            room.id, check_in="2024-03-01T10:00:00Z", check_out="2024-03-01T20:00:00Z"
        ),
    )

    assert res.status_code == 400
    assert res.json()["detail"] == "Stay must be at least one night"
    assert mailer.sent == []
    assert await count_bookings(session_factory) == 0


async def test_unparseable_date_is_a_field_error(client, room):
    res = await client.post("/api/bookings", json=booking_payload(room.id, check_in="next friday"))
    assert res.status_code == 400
    assert "check_in" in res.json()["fields"]


async def test_same_request_twice_creates_two_bookings(client, room, session_factory):
    first = await client.post("/api/bookings", json=booking_payload(room.id))
    second = await client.post("/api/bookings", json=booking_payload(room.id))

    assert first.status_code == second.status_code == 201
    assert first.json()["booking"]["id"] != second.json()["booking"]["id"]
    assert await count_bookings(session_factory) == 2


async def test_mail_failure_still_returns_created_booking(client, room, session_factory):
    failing = FailingMailer()
    app.dependency_overrides[get_mailer] = lambda: failing

    res = await client.post("/api/bookings", json=booking_payload(room.id))

    assert res.status_code == 201
    assert failing.calls == 2
    booking_id = res.json()["booking"]["id"]
    async with session_factory() as s:
        stored = await crud_bookings.get_booking(s, booking_id)
    assert stored is not None
    assert stored.status.value == "pending"


async def test_slow_mail_is_bounded(client, room, monkeypatch):
    class SlowMailer(Mailer):
        async def send(self, to, subject, html, attachments=None):
            await asyncio.sleep(5)

    monkeypatch.setattr(settings, "MAIL_TIMEOUT_SECONDS", 0.05)
    app.dependency_overrides[get_mailer] = lambda: SlowMailer()

    started = time.monotonic()
    res = await client.post("/api/bookings", json=booking_payload(room.id))

    assert res.status_code == 201
    assert time.monotonic() - started < 2


async def test_admin_mail_skipped_when_not_configured(client, room, mailer, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_EMAIL", "")

    res = await client.post("/api/bookings", json=booking_payload(room.id))

    assert res.status_code == 201
    assert [m["to"] for m in mailer.sent] == ["guest.person@example.com"]


async def test_persistence_failure_is_generic_500(client, room, mailer, monkeypatch):
    async def broken_insert(db, **kwargs):
        raise OperationalError("INSERT INTO bookings", {}, Exception("disk I/O error"))

    monkeypatch.setattr(crud_bookings, "create_booking", broken_insert)

    res = await client.post("/api/bookings", json=booking_payload(room.id))

    assert res.status_code == 500
    assert res.json() == {"detail": "Server error"}
    assert mailer.sent == []


async def test_linked_account_name_used_for_greeting_only(client, room, mailer, make_user):
    ada = await make_user("ada@example.com", first_name="Ada")

    res = await client.post(
        "/api/bookings", json=booking_payload(room.id, user_id=ada.id, first_name="Guest")
    )

    assert res.status_code == 201
    booking = res.json()["booking"]
    assert booking["first_name"] == "Guest"
    assert booking["user_id"] == ada.id
    guest_mail = next(m for m in mailer.sent if m["subject"] == "Booking Confirmation")
    assert "Dear Ada," in guest_mail["html"]
    assert "Dear Guest," not in guest_mail["html"]


async def test_unknown_account_falls_back_to_supplied_name(client, room, mailer):
    res = await client.post("/api/bookings", json=booking_payload(room.id, user_id=4242))

    assert res.status_code == 201
    assert res.json()["booking"]["user_id"] is None
    guest_mail = next(m for m in mailer.sent if m["subject"] == "Booking Confirmation")
    assert "Dear Guest," in guest_mail["html"]


async def test_bearer_token_links_booking_to_caller(client, room, make_user, auth_header):
    grace = await make_user("grace@example.com", first_name="Grace")

    res = await client.post(
        "/api/bookings", json=booking_payload(room.id), headers=auth_header(grace)
    )
    assert res.status_code == 201
    assert res.json()["booking"]["user_id"] == grace.id

    res = await client.post(
        "/api/bookings",
        json=booking_payload(room.id),
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert res.status_code == 401


async def test_my_bookings_scoped_to_caller(client, room, make_user, auth_header):
    ada = await make_user("ada@example.com", first_name="Ada")
    bob = await make_user("bob@example.com", first_name="Bob")
    await client.post("/api/bookings", json=booking_payload(room.id, user_id=ada.id))
    await client.post("/api/bookings", json=booking_payload(room.id, user_id=bob.id))
    await client.post("/api/bookings", json=booking_payload(room.id))

    res = await client.get("/api/bookings/my-bookings", headers=auth_header(ada))

    assert res.status_code == 200
    items = res.json()["items"]
    assert len(items) == 1
    assert items[0]["user_id"] == ada.id
    assert items[0]["room"]["name"] == "Deluxe King"

    res = await client.get("/api/bookings/my-bookings")
    assert res.status_code == 401


async def test_admin_lists_all_bookings_newest_first(client, room, admin, make_user, auth_header):
    ada = await make_user("ada@example.com", first_name="Ada")
    older = await client.post("/api/bookings", json=booking_payload(room.id, user_id=ada.id))
    newer = await client.post("/api/bookings", json=booking_payload(room.id))

    res = await client.get("/api/bookings", headers=auth_header(admin))

    assert res.status_code == 200
    items = res.json()["items"]
    assert [b["id"] for b in items] == [
        newer.json()["booking"]["id"],
        older.json()["booking"]["id"],
    ]
    assert items[0]["room"]["price_per_night"] == 100.0
    assert items[0]["user"] is None
    assert items[1]["user"]["first_name"] == "Ada"


async def test_admin_listing_requires_admin_role(client, make_user, auth_header):
    res = await client.get("/api/bookings")
    assert res.status_code == 401

    user = await make_user("plain@example.com")
    res = await client.get("/api/bookings", headers=auth_header(user))
    assert res.status_code == 403
