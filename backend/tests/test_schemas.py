"""
TripLink Backend — Schema & Validation Tests
==============================================

What we test:
    ✅ validate_record() reports every failing field at once
    ✅ Date-only strings become midnight UTC; reversed ranges are rejected
    ✅ Blank optional strings are treated as missing
    ✅ Message context pair must be complete
    ✅ Public user projection has no password
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from triplink.exceptions import ValidationError
from triplink.models import ContextType, MessageType, Role
from triplink.schemas import format_errors, validate_record
from triplink.schemas.booking import BookingCreate
from triplink.schemas.message import MessageContext, MessageCreate
from triplink.schemas.service import AvailabilityWindow, ServiceCreate
from triplink.schemas.user import LoginRequest, UserCreate, UserPublic


class TestValidateRecord:

    def test_valid_service_is_coerced(self):
        record = validate_record(
            "service",
            {"title": "Tour", "price": "49.99", "location": "Lisbon", "category": "tour"},
        )
        assert isinstance(record, ServiceCreate)
        assert record.price == Decimal("49.99")

    def test_every_invalid_field_is_reported(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_record("user", {"username": "ab", "email": "not-an-email"})

        fields = {err["field"] for err in exc_info.value.errors}
        assert {"username", "email", "password"} <= fields

    @pytest.mark.parametrize("kind", ["booking", "trip"])
    def test_reversed_range_reported_on_end_date(self, kind):
        raw = {"startDate": "2024-06-04", "endDate": "2024-06-01"}
        raw.update({"serviceId": 1} if kind == "booking" else {"title": "Porto", "destination": "Porto"})

        with pytest.raises(ValidationError) as exc_info:
            validate_record(kind, raw)

        assert [err["field"] for err in exc_info.value.errors] == ["endDate"]
        assert "startDate must be on or before endDate" in exc_info.value.errors[0]["message"]

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_record("spaceship", {})
        assert exc_info.value.field == "kind"

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_record(
                "service",
                {"title": "Tour", "price": "-1", "location": "Lisbon", "category": "tour"},
            )
        assert exc_info.value.errors[0]["field"] == "price"

    def test_three_decimal_places_rejected(self):
        with pytest.raises(ValidationError):
            validate_record(
                "service",
                {"title": "Tour", "price": "1.999", "location": "Lisbon", "category": "tour"},
            )


class TestFormatErrors:

    def test_body_prefix_dropped_and_value_error_prefix_stripped(self):
        errors = format_errors(
            [{"loc": ("body", "startDate"), "msg": "Value error, bad date", "type": "value_error"}]
        )
        assert errors == [{"field": "startDate", "message": "bad date", "type": "value_error"}]

    def test_model_level_error_maps_to_body(self):
        errors = format_errors([{"loc": ("body",), "msg": "oops", "type": "value_error"}])
        assert errors[0]["field"] == "body"


class TestBookingCreate:

    def test_date_only_is_midnight_utc(self):
        booking = BookingCreate.model_validate(
            {"serviceId": 1, "startDate": "2024-06-01", "endDate": "2024-06-04"}
        )
        assert booking.start_date == datetime(2024, 6, 1, tzinfo=timezone.utc)
        assert booking.end_date == datetime(2024, 6, 4, tzinfo=timezone.utc)

    def test_naive_datetime_taken_as_utc(self):
        booking = BookingCreate.model_validate(
            {"serviceId": 1, "startDate": "2024-06-01T10:30:00"}
        )
        assert booking.start_date.tzinfo is not None
        assert booking.start_date.hour == 10

    def test_blank_end_date_is_missing(self):
        booking = BookingCreate.model_validate(
            {"serviceId": 1, "startDate": "2024-06-01", "endDate": "", "notes": "  "}
        )
        assert booking.end_date is None
        assert booking.notes is None

    def test_end_before_start_rejected(self):
        with pytest.raises(ValueError):
            BookingCreate.model_validate(
                {"serviceId": 1, "startDate": "2024-06-04", "endDate": "2024-06-01"}
            )

    def test_status_and_price_in_body_are_ignored(self):
        booking = BookingCreate.model_validate(
            {"serviceId": 1, "startDate": "2024-06-01", "status": "confirmed", "totalPrice": "0"}
        )
        assert not hasattr(booking, "status")
        assert booking.quantity == 1


class TestAvailabilityWindow:

    def test_covers_inner_range(self):
        window = AvailabilityWindow.model_validate(
            {"startDate": "2024-06-01", "endDate": "2024-06-30"}
        )
        assert window.covers(
            datetime(2024, 6, 10, tzinfo=timezone.utc),
            datetime(2024, 6, 12, tzinfo=timezone.utc),
        )
        assert not window.covers(
            datetime(2024, 6, 28, tzinfo=timezone.utc),
            datetime(2024, 7, 2, tzinfo=timezone.utc),
        )

    def test_reversed_window_rejected(self):
        with pytest.raises(ValueError):
            AvailabilityWindow.model_validate({"startDate": "2024-06-30", "endDate": "2024-06-01"})


class TestMessageCreate:

    def test_context_built_from_pair(self):
        msg = MessageCreate.model_validate(
            {
                "receiverId": 2,
                "message": "Is pickup included?",
                "messageType": "booking_support",
                "contextType": "booking",
                "contextId": 12,
            }
        )
        assert msg.context == MessageContext(kind=ContextType.BOOKING, id=12)
        assert msg.message_type is MessageType.BOOKING_SUPPORT

    def test_no_context(self):
        msg = MessageCreate.model_validate(
            {"receiverId": 2, "message": "hi", "messageType": "expert_inquiry"}
        )
        assert msg.context is None

    def test_half_context_rejected(self):
        with pytest.raises(ValueError):
            MessageCreate.model_validate(
                {"receiverId": 2, "message": "hi", "messageType": "expert_inquiry", "contextType": "trip"}
            )

    def test_unknown_message_type_rejected(self):
        with pytest.raises(ValueError):
            MessageCreate.model_validate({"receiverId": 2, "message": "hi", "messageType": "spam"})

    def test_blank_message_rejected(self):
        with pytest.raises(ValueError):
            MessageCreate.model_validate(
                {"receiverId": 2, "message": "   ", "messageType": "expert_inquiry"}
            )


class TestUserSchemas:

    def test_email_lowercased_and_role_defaults_to_user(self):
        user = UserCreate.model_validate(
            {"username": "  maria  ", "email": "Maria@Example.COM", "password": "secret123"}
        )
        assert user.username == "maria"
        assert user.email == "maria@example.com"
        assert user.role is Role.USER

    def test_short_password_rejected(self):
        with pytest.raises(ValueError):
            UserCreate.model_validate(
                {"username": "maria", "email": "maria@example.com", "password": "123"}
            )

    def test_public_projection_has_no_password(self):
        public = UserPublic.model_validate(
            {
                "id": 1,
                "username": "maria",
                "email": "maria@example.com",
                "role": "user",
                "password": "hash",
            }
        )
        dumped = public.model_dump(by_alias=True)
        assert "password" not in dumped
        assert dumped["username"] == "maria"

    def test_login_requires_identifier(self):
        with pytest.raises(ValueError):
            LoginRequest.model_validate({"password": "secret123"})

    def test_login_identifier_prefers_username(self):
        login = LoginRequest.model_validate(
            {"username": "maria", "email": "maria@example.com", "password": "x"}
        )
        assert login.identifier == "maria"
