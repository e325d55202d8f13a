"""Tests for the screen controllers."""

import asyncio
import json
from datetime import date, timedelta

import httpx
import pytest

from conftest import TOKEN
from hotel_portal.controllers import (
    AuthController,
    BookingController,
    BookingListController,
    CheckInController,
    ConfirmationController,
    GuestForm,
    HotelListController,
    SubmissionState,
)
from hotel_portal.errors import CONNECTIVITY_MESSAGE, SESSION_EXPIRED_MESSAGE
from hotel_portal.navigation import Route

TODAY = date(2026, 10, 18)


def booking_screen(session, hotel_id=1):
    return BookingController(session, hotel_id, today=lambda: TODAY)


def fill_booking(screen, nights=2, aadhaar=""):
    screen.check_in_date = TODAY + timedelta(days=1)
    screen.check_out_date = TODAY + timedelta(days=1 + nights)
    screen.primary_guest_aadhaar = aadhaar


async def loaded_checkin_screen(session, fake_api, booking, booking_id=101):
    fake_api.add("GET", f"/checkin/booking/{booking_id}", json=booking)
    screen = CheckInController(session, booking_id)
    await screen.load()
    return screen


def fill_roster(screen):
    screen.guests = [
        GuestForm(name=" Asha Rao ", aadhaar_number="123456789012", age="34"),
        GuestForm(name="Vikram Rao", aadhaar_number="210987654321", age="36"),
    ]


class TestAuthController:
    """Tests for the login/register screen."""

    @pytest.mark.asyncio
    async def test_login_success_redirects_to_hotels(self, session, fake_api, profile_response):
        fake_api.add("POST", "/auth/login", json={"token": TOKEN})
        fake_api.add("GET", "/auth/profile", json=profile_response)
        screen = AuthController(session)
        screen.email, screen.password = "asha@example.com", "secret1"

        outcome = await screen.submit()

        assert outcome.success
        assert outcome.redirect.route is Route.HOTELS
        assert session.is_authenticated
        assert session.token_store.get() == TOKEN

    @pytest.mark.asyncio
    async def test_invalid_form_makes_no_call(self, session, fake_api):
        screen = AuthController(session)
        screen.email, screen.password = "asha", "123"

        outcome = await screen.submit()

        assert outcome.state is SubmissionState.INVALID
        assert set(outcome.field_errors) == {"email", "password"}
        assert screen.state is SubmissionState.IDLE
        assert fake_api.requests == []

    @pytest.mark.asyncio
    async def test_wrong_password_shows_message(self, session, fake_api):
        fake_api.add("POST", "/auth/login", status=400, json={"message": "Invalid credentials"})
        screen = AuthController(session)
        screen.email, screen.password = "asha@example.com", "secret1"

        outcome = await screen.submit()

        assert outcome.state is SubmissionState.FAILED
        assert outcome.general_error == "Invalid credentials"
        assert outcome.redirect is None
        assert not session.is_authenticated

    @pytest.mark.asyncio
    async def test_switch_tab_clears_errors(self, session, fake_api):
        fake_api.add("POST", "/auth/register", status=409, json={"message": "Email already in use"})
        screen = AuthController(session, tab="register")
        screen.email, screen.password = "asha@example.com", "secret1"
        await screen.submit()

        screen.switch_tab("login")

        assert screen.general_error is None
        assert screen.field_errors == {}
        assert session.error is None

    def test_shows_notice_from_redirect(self, session):
        screen = AuthController(session, notice=SESSION_EXPIRED_MESSAGE)

        assert screen.notice == SESSION_EXPIRED_MESSAGE


class TestBookingController:
    """Tests for the booking form."""

    @pytest.mark.asyncio
    async def test_load_hotel(self, logged_in_session, fake_api, hotels_response):
        fake_api.add("GET", "/hotels/1", json=hotels_response[0])
        screen = booking_screen(logged_in_session)

        outcome = await screen.load()

        assert outcome.success
        assert screen.hotel.name == "Taj Palace"

    @pytest.mark.asyncio
    async def test_load_failure_message(self, logged_in_session, fake_api):
        fake_api.add("GET", "/hotels/1", status=500)
        screen = booking_screen(logged_in_session)

        outcome = await screen.load()

        assert not outcome.success
        assert screen.general_error == "Failed to fetch hotel details. Please try again later."

    @pytest.mark.asyncio
    async def test_same_day_checkout_blocked_locally(self, logged_in_session, fake_api):
        screen = booking_screen(logged_in_session)
        screen.check_in_date = TODAY + timedelta(days=2)
        screen.check_out_date = TODAY + timedelta(days=2)
        calls_before = len(fake_api.requests)

        outcome = await screen.submit()

        assert outcome.state is SubmissionState.INVALID
        assert outcome.field_errors == {"check_out_date": "Check-out date must be after check-in date"}
        assert len(fake_api.requests) == calls_before

    @pytest.mark.asyncio
    async def test_successful_booking_redirects_with_state(self, logged_in_session, fake_api):
        fake_api.add("POST", "/hotels/1/book", status=201, json={"booking": {"id": 555}})
        screen = booking_screen(logged_in_session)
        fill_booking(screen, aadhaar=" 123456789012 ")

        outcome = await screen.submit()

        assert outcome.success
        assert outcome.redirect.route is Route.BOOKINGS
        assert outcome.redirect.state == {
            "success": True,
            "message": "Hotel booked successfully!",
            "booking_id": 555,
        }
        request = fake_api.calls("POST", "/hotels/1/book")[0]
        assert request.headers["Authorization"] == f"Bearer {TOKEN}"

    def test_payload_omits_blank_aadhaar(self, session):
        screen = booking_screen(session)
        fill_booking(screen, nights=3)

        assert screen.build_payload() == {"checkInDate": "2026-10-19", "checkOutDate": "2026-10-22"}
        assert screen.nights == 3

    def test_payload_includes_trimmed_valid_aadhaar(self, session):
        screen = booking_screen(session)
        fill_booking(screen, aadhaar="123456789012 ")

        assert screen.build_payload()["primaryGuestAadhaar"] == "123456789012"

    @pytest.mark.asyncio
    async def test_business_error_includes_details(self, logged_in_session, fake_api):
        fake_api.add(
            "POST",
            "/hotels/1/book",
            status=400,
            json={"message": "Hotel fully booked", "details": "No rooms on 2026-10-20"},
        )
        screen = booking_screen(logged_in_session)
        fill_booking(screen)

        outcome = await screen.submit()

        assert outcome.general_error == "Hotel fully booked (No rooms on 2026-10-20)"
        assert screen.state is SubmissionState.IDLE
        assert logged_in_session.is_authenticated

    @pytest.mark.asyncio
    async def test_unknown_error_uses_generic_message(self, logged_in_session, fake_api):
        fake_api.add("POST", "/hotels/1/book", handler=lambda request: httpx.Response(201, text="<ok>"))
        screen = booking_screen(logged_in_session)
        fill_booking(screen)

        outcome = await screen.submit()

        assert outcome.general_error == "Failed to book hotel. Please try again."

    @pytest.mark.asyncio
    async def test_no_token_redirects_without_call(self, session, fake_api):
        screen = booking_screen(session)
        fill_booking(screen)

        outcome = await screen.submit()

        assert outcome.redirect.route is Route.AUTH
        assert fake_api.requests == []

    @pytest.mark.asyncio
    async def test_double_submit_sends_one_request(self, logged_in_session, fake_api):
        release = asyncio.Event()

        async def slow_booking(request):
            await release.wait()
            return httpx.Response(201, json={"booking": {"id": 556}})

        fake_api.add("POST", "/hotels/1/book", handler=slow_booking)
        screen = booking_screen(logged_in_session)
        fill_booking(screen)

        first = asyncio.create_task(screen.submit())
        await asyncio.sleep(0)
        assert screen.state is SubmissionState.SUBMITTING
        assert screen.can_submit is False

        second = await screen.submit()
        release.set()
        first_outcome = await first

        assert second.ignored is True
        assert first_outcome.success
        assert len(fake_api.calls("POST", "/hotels/1/book")) == 1
        assert screen.can_submit is True


class TestCheckInController:
    """Tests for web check-in."""

    @pytest.mark.asyncio
    async def test_load_confirmed_booking(self, logged_in_session, fake_api, checkin_booking_response):
        fake_api.add("GET", "/checkin/booking/101", json=checkin_booking_response)
        screen = CheckInController(logged_in_session, 101)

        outcome = await screen.load()

        assert outcome.success
        assert screen.booking.hotel.name == "Taj Palace"

    @pytest.mark.asyncio
    async def test_load_refuses_checked_in_booking(self, logged_in_session, fake_api, checkin_booking_response):
        fake_api.add("GET", "/checkin/booking/101", json={**checkin_booking_response, "status": "CHECKED_IN"})
        screen = CheckInController(logged_in_session, 101)

        outcome = await screen.load()

        assert not outcome.success
        assert screen.general_error == "This booking has already been checked in."
        assert screen.booking is None

    @pytest.mark.asyncio
    async def test_load_missing_booking(self, logged_in_session, fake_api):
        fake_api.add("GET", "/checkin/booking/101", status=200, json=None)
        screen = CheckInController(logged_in_session, 101)

        await screen.load()

        assert screen.general_error == "Booking not found or you do not have permission to access it."

    def test_roster_editing(self, session):
        screen = CheckInController(session, 101)
        screen.field_errors = {"guests[0].name": "Name is required", "guests[0].age": "Age is required"}

        screen.update_guest(0, "name", "Asha Rao")
        assert screen.field_errors == {"guests[0].age": "Age is required"}

        screen.add_guest()
        screen.remove_guest(1)
        screen.remove_guest(0)

        assert len(screen.guests) == 1
        assert screen.guests[0].name == "Asha Rao"
        assert screen.field_errors == {}

    @pytest.mark.parametrize("index", [2, -1, 99])
    def test_remove_guest_ignores_bad_index(self, session, index):
        screen = CheckInController(session, 101)
        screen.guests = [GuestForm(name="Asha"), GuestForm(name="Vikram")]

        screen.remove_guest(index)

        assert [guest.name for guest in screen.guests] == ["Asha", "Vikram"]

    def test_update_unknown_field_rejected(self, session):
        screen = CheckInController(session, 101)

        with pytest.raises(ValueError):
            screen.update_guest(0, "passport", "X1234")

    @pytest.mark.asyncio
    async def test_submit_sends_trimmed_roster(self, logged_in_session, fake_api, checkin_booking_response):
        fake_api.add("POST", "/checkin/booking/101", json={"message": "Check-in successful"})
        screen = await loaded_checkin_screen(logged_in_session, fake_api, checkin_booking_response)
        fill_roster(screen)

        outcome = await screen.submit()

        assert outcome.success
        assert outcome.redirect.state["message"] == "Check-in completed successfully!"
        request = fake_api.calls("POST", "/checkin/booking/101")[0]
        assert json.loads(request.read()) == {
            "guests": [
                {"name": "Asha Rao", "aadhaarNumber": "123456789012", "age": 34},
                {"name": "Vikram Rao", "aadhaarNumber": "210987654321", "age": 36},
            ]
        }

    @pytest.mark.asyncio
    async def test_already_registered_aadhaar_shown_verbatim(
        self, logged_in_session, fake_api, checkin_booking_response
    ):
        message = "Aadhaar number already registered: 210987654321"
        fake_api.add("POST", "/checkin/booking/101", status=400, json={"message": message})
        screen = await loaded_checkin_screen(logged_in_session, fake_api, checkin_booking_response)
        fill_roster(screen)

        outcome = await screen.submit()

        assert outcome.general_error == message
        assert outcome.redirect is None
        assert [guest.aadhaar_number for guest in screen.guests] == ["123456789012", "210987654321"]
        assert screen.can_submit

    @pytest.mark.asyncio
    async def test_invalid_roster_reports_all_fields(self, logged_in_session, fake_api):
        screen = CheckInController(logged_in_session, 101)
        screen.guests = [GuestForm(), GuestForm(name="Kid", aadhaar_number="1234", age="-1")]
        calls_before = len(fake_api.requests)

        outcome = await screen.submit()

        assert len(outcome.field_errors) == 5
        assert len(fake_api.requests) == calls_before

    @pytest.mark.asyncio
    async def test_transport_failure_shows_connectivity_message(
        self, logged_in_session, fake_api, checkin_booking_response
    ):
        def refuse(request):
            raise httpx.ConnectError("Connection refused", request=request)

        fake_api.add("POST", "/checkin/booking/101", handler=refuse)
        screen = await loaded_checkin_screen(logged_in_session, fake_api, checkin_booking_response)
        fill_roster(screen)

        outcome = await screen.submit()

        assert outcome.general_error == CONNECTIVITY_MESSAGE

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", ["PENDING", "CANCELLED", "ON_HOLD"])
    async def test_only_confirmed_booking_can_be_checked_in(
        self, logged_in_session, fake_api, checkin_booking_response, status
    ):
        fake_api.add("POST", "/checkin/booking/101", json={"message": "Check-in successful"})
        screen = await loaded_checkin_screen(
            logged_in_session, fake_api, {**checkin_booking_response, "status": status}
        )
        assert screen.general_error == "Only confirmed bookings can be checked in."
        assert screen.booking is None
        fill_roster(screen)

        outcome = await screen.submit()

        assert outcome.state is SubmissionState.FAILED
        assert outcome.redirect is None
        assert fake_api.calls("POST", "/checkin/booking/101") == []

    @pytest.mark.asyncio
    async def test_submit_without_loaded_booking_sends_nothing(self, logged_in_session, fake_api):
        fake_api.add("POST", "/checkin/booking/101", json={"message": "Check-in successful"})
        screen = CheckInController(logged_in_session, 101)
        fill_roster(screen)

        outcome = await screen.submit()

        assert outcome.general_error == "Booking details are not loaded yet. Please try again."
        assert fake_api.calls("POST", "/checkin/booking/101") == []
        assert screen.can_submit

    @pytest.mark.asyncio
    async def test_submit_without_token_redirects_to_login(self, session, fake_api):
        screen = CheckInController(session, 101)
        fill_roster(screen)

        outcome = await screen.submit()

        assert outcome.redirect.route is Route.AUTH
        assert fake_api.requests == []


class TestBookingListController:
    """Tests for the booking history screen."""

    @pytest.mark.asyncio
    async def test_rows_have_one_action_each(self, logged_in_session, fake_api, bookings_response):
        fake_api.add("GET", "/bookings", json=bookings_response)
        screen = BookingListController(logged_in_session)

        outcome = await screen.load()

        assert outcome.success
        actions = [(row.booking.id, row.action.label, row.action.enabled) for row in screen.rows]
        assert actions == [
            (101, "Web Check-in", True),
            (102, "Already Checked In", False),
            (103, "Awaiting Confirmation", False),
            (104, "Booking Cancelled", False),
            (105, "Unavailable", False),
        ]
        assert screen.rows[0].nights == 3

    @pytest.mark.asyncio
    async def test_start_check_in_only_for_confirmed(self, logged_in_session, fake_api, bookings_response):
        fake_api.add("GET", "/bookings", json=bookings_response)
        screen = BookingListController(logged_in_session)
        await screen.load()

        assert screen.start_check_in(101).path == "/checkin/101"
        assert screen.start_check_in("102") is None
        assert screen.start_check_in(999) is None

    @pytest.mark.asyncio
    async def test_401_clears_session_and_redirects(self, logged_in_session, fake_api):
        fake_api.add("GET", "/bookings", status=401, json={"message": "jwt expired"})
        screen = BookingListController(logged_in_session)

        outcome = await screen.load()

        assert outcome.redirect.route is Route.AUTH
        assert outcome.redirect.message == SESSION_EXPIRED_MESSAGE
        assert (logged_in_session.token, logged_in_session.user) == (None, None)
        assert logged_in_session.token_store.get() is None
        assert outcome.general_error is None

    @pytest.mark.asyncio
    async def test_logout_propagates_to_other_screens(self, logged_in_session, fake_api, bookings_response):
        fake_api.add("GET", "/bookings", json=bookings_response)
        hotels = HotelListController(logged_in_session)
        bookings = BookingListController(logged_in_session)
        calls_before = len(fake_api.requests)

        logged_in_session.logout()
        outcome = await bookings.load()

        assert hotels.redirect.route is Route.AUTH
        assert outcome.redirect.route is Route.AUTH
        assert len(fake_api.requests) == calls_before

    @pytest.mark.asyncio
    async def test_error_messages_by_category(self, logged_in_session, fake_api):
        screen = BookingListController(logged_in_session)

        fake_api.add("GET", "/bookings", status=500)
        await screen.load()
        assert screen.general_error == "Failed to fetch your bookings. Please try again."

        fake_api.add("GET", "/bookings", status=403, json={"message": "Account suspended"})
        await screen.load()
        assert screen.general_error == "Account suspended"

        fake_api.add("GET", "/bookings", handler=lambda request: httpx.Response(200, text="{"))
        await screen.load()
        assert screen.general_error == "An unexpected error occurred. Please try again."

    def test_notification_from_redirect(self, session):
        screen = BookingListController(session, incoming_state={"success": True, "message": "Hotel booked successfully!"})

        notification = screen.consume_notification()

        assert notification.message == "Hotel booked successfully!"
        assert screen.consume_notification() is None


class TestHotelAndConfirmation:
    """Tests for the hotel list and confirmation screens."""

    @pytest.mark.asyncio
    async def test_hotels_load(self, logged_in_session, fake_api, hotels_response):
        fake_api.add("GET", "/hotels", json=hotels_response)
        screen = HotelListController(logged_in_session)

        await screen.load()

        assert len(screen.hotels) == 2
        assert screen.book(2).path == "/book/2"

    @pytest.mark.asyncio
    async def test_hotels_failure_message(self, logged_in_session, fake_api):
        fake_api.add("GET", "/hotels", status=500)
        screen = HotelListController(logged_in_session)

        await screen.load()

        assert screen.general_error == "Failed to fetch hotels. Please try again later."

    def test_confirmation_without_success_redirects(self):
        assert ConfirmationController({}).redirect.route is Route.BOOKINGS

    def test_confirmation_defaults(self):
        screen = ConfirmationController({"success": True, "booking_id": 555})

        assert screen.redirect is None
        assert screen.message == "Your request has been processed successfully."
        assert screen.booking_id == 555
