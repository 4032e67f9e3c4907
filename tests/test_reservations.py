"""
Tests for reservation booking, availability, lifecycle and table assignment.
"""

from datetime import timedelta

from sqlalchemy import func, select

from ordo_api.models import Customer, DiningTable, Reservation
from ordo_shared.utils.clock import restaurant_today
from tests.helpers import MONDAY, SUNDAY, next_weekday, reservation_payload


class TestCreateReservation:
    """Booking requests are checked against the opening hours."""

    def test_create_pending(self, client, restaurant_config):
        response = client.post("/api/reservations", json=reservation_payload(next_weekday(MONDAY)))
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "PENDING"
        assert data["reservation_time"] == "19:30"
        assert data["customer_phone"] == "5598765432"

    def test_monday_last_booking_window(self, client, restaurant_config):
        """Monday closes at 22:00, so the last start is 20:00."""
        monday = next_weekday(MONDAY)
        late = client.post("/api/reservations", json=reservation_payload(monday, time="20:30"))
        assert late.status_code == 400
        assert late.json()["code"] == "BAD_REQUEST"

        ok = client.post("/api/reservations", json=reservation_payload(monday, time="19:30"))
        assert ok.status_code == 201

    def test_before_opening_rejected(self, client, restaurant_config):
        response = client.post(
            "/api/reservations", json=reservation_payload(next_weekday(MONDAY), time="08:30")
        )
        assert response.status_code == 400

    def test_closed_day_persists_nothing(self, client, db_session, restaurant_config):
        response = client.post("/api/reservations", json=reservation_payload(next_weekday(SUNDAY)))
        assert response.status_code == 400
        assert db_session.scalar(select(func.count(Reservation.id))) == 0
        assert db_session.scalar(select(func.count(Customer.id))) == 0

    def test_past_date_rejected(self, client, restaurant_config):
        yesterday = restaurant_today() - timedelta(days=1)
        response = client.post("/api/reservations", json=reservation_payload(yesterday))
        assert response.status_code == 400

    def test_bad_time_format_rejected(self, client, restaurant_config):
        response = client.post(
            "/api/reservations", json=reservation_payload(next_weekday(MONDAY), time="7pm")
        )
        assert response.status_code == 400

    def test_phone_is_checked_after_normalizing(self, client, db_session, restaurant_config):
        monday = next_weekday(MONDAY)
        response = client.post(
            "/api/reservations", json=reservation_payload(monday, customer_phone="(((((((((((")
        )
        assert response.status_code == 400
        assert db_session.scalar(select(func.count(Reservation.id))) == 0

        accepted = client.post(
            "/api/reservations", json=reservation_payload(monday, customer_phone="+52 (55) 9876-5432")
        )
        assert accepted.json()["customer_phone"] == "+525598765432"

    def test_without_config(self, client):
        response = client.post("/api/reservations", json=reservation_payload(next_weekday(MONDAY)))
        assert response.status_code == 404

    def test_reservations_disabled(self, client, db_session, restaurant_config):
        restaurant_config.services = {**restaurant_config.services, "reservations": False}
        db_session.commit()
        response = client.post("/api/reservations", json=reservation_payload(next_weekday(MONDAY)))
        assert response.status_code == 403

    def test_reuses_customer_by_phone(self, client, db_session, restaurant_config):
        monday = next_weekday(MONDAY)
        client.post("/api/reservations", json=reservation_payload(monday, time="13:00"))
        client.post("/api/reservations", json=reservation_payload(monday, time="14:00"))
        assert db_session.scalar(select(func.count(Customer.id))) == 1


class TestAvailableTimes:
    """Slot availability."""

    def _times(self, client, day, party_size=2):
        response = client.get(
            "/api/reservations/available-times",
            params={"date": day.isoformat(), "party_size": party_size},
        )
        assert response.status_code == 200
        return response.json()

    def test_monday_slots(self, client, restaurant_config):
        times = self._times(client, next_weekday(MONDAY))["available_times"]
        assert times[0] == "09:00"
        assert times[-1] == "20:00"
        assert "20:30" not in times
        assert len(times) == 23

    def test_closed_day_has_no_slots(self, client, restaurant_config):
        data = self._times(client, next_weekday(SUNDAY))
        assert data["available_times"] == []
        assert data["message"]

    def test_no_config_has_no_slots(self, client):
        assert self._times(client, next_weekday(MONDAY))["available_times"] == []

    def test_full_slot_hidden(self, client, restaurant_config):
        """Without tables the flat capacity of 3 applies."""
        monday = next_weekday(MONDAY)
        for _ in range(3):
            client.post("/api/reservations", json=reservation_payload(monday, time="19:30"))
        times = self._times(client, monday)["available_times"]
        assert "19:30" not in times
        assert "19:00" in times

    def test_cancelled_reservations_free_the_slot(self, client, waiter_headers, restaurant_config):
        monday = next_weekday(MONDAY)
        ids = [
            client.post("/api/reservations", json=reservation_payload(monday, time="19:30")).json()["id"]
            for _ in range(3)
        ]
        client.post(f"/api/reservations/{ids[0]}/cancel", json={}, headers=waiter_headers)
        assert "19:30" in self._times(client, monday)["available_times"]

    def test_capacity_follows_tables(self, client, restaurant_config, dining_tables):
        """Tables seat 2 and 4: a party of 4 has one table per slot."""
        monday = next_weekday(MONDAY)
        client.post("/api/reservations", json=reservation_payload(monday, time="19:30", party_size=2))

        assert "19:30" not in self._times(client, monday, party_size=4)["available_times"]
        assert "19:30" in self._times(client, monday, party_size=2)["available_times"]

    def test_tables_never_raise_capacity_above_three(self, client, db_session, restaurant_config):
        """Five tables fit the party, the slot still holds three bookings."""
        db_session.add_all([DiningTable(number=n, seats=4) for n in range(1, 6)])
        db_session.commit()
        monday = next_weekday(MONDAY)
        for _ in range(3):
            client.post("/api/reservations", json=reservation_payload(monday, time="19:30"))

        assert "19:30" not in self._times(client, monday)["available_times"]

    def test_party_too_large_for_any_table(self, client, restaurant_config, dining_tables):
        assert self._times(client, next_weekday(MONDAY), party_size=6)["available_times"] == []


class TestReservationLifecycle:
    """Staff confirm, seat and cancel; guests cancel with their phone."""

    def _book(self, client, **extra):
        return client.post(
            "/api/reservations", json=reservation_payload(next_weekday(MONDAY), **extra)
        ).json()

    def test_confirm_then_seat(self, client, waiter_headers, restaurant_config):
        reservation = self._book(client)
        confirmed = client.post(f"/api/reservations/{reservation['id']}/confirm", headers=waiter_headers)
        assert confirmed.json()["status"] == "CONFIRMED"
        seated = client.post(f"/api/reservations/{reservation['id']}/seat", headers=waiter_headers)
        assert seated.json()["status"] == "SEATED"

    def test_seat_before_confirm_rejected(self, client, waiter_headers, restaurant_config):
        reservation = self._book(client)
        response = client.post(f"/api/reservations/{reservation['id']}/seat", headers=waiter_headers)
        assert response.status_code == 412

    def test_confirm_twice_is_noop(self, client, waiter_headers, restaurant_config):
        reservation = self._book(client)
        client.post(f"/api/reservations/{reservation['id']}/confirm", headers=waiter_headers)
        response = client.post(f"/api/reservations/{reservation['id']}/confirm", headers=waiter_headers)
        assert response.status_code == 200

    def test_guest_cancel_with_matching_phone(self, client, restaurant_config):
        reservation = self._book(client)
        response = client.post(
            f"/api/reservations/{reservation['id']}/cancel",
            json={"customer_phone": "55 9876 5432", "reason": "Change of plans"},
        )
        assert response.status_code == 200
        assert response.json()["status"] == "CANCELLED"
        assert "Change of plans" in response.json()["notes"]

    def test_guest_cancel_with_wrong_phone(self, client, restaurant_config):
        reservation = self._book(client)
        response = client.post(
            f"/api/reservations/{reservation['id']}/cancel", json={"customer_phone": "5500000000"}
        )
        assert response.status_code == 403

    def test_guest_cancel_without_phone(self, client, restaurant_config):
        reservation = self._book(client)
        assert client.post(f"/api/reservations/{reservation['id']}/cancel").status_code == 403

    def test_staff_cancel_without_phone(self, client, waiter_headers, restaurant_config):
        reservation = self._book(client)
        response = client.post(f"/api/reservations/{reservation['id']}/cancel", headers=waiter_headers)
        assert response.status_code == 200

    def test_cancel_unknown(self, client, waiter_headers):
        assert client.post("/api/reservations/999/cancel", headers=waiter_headers).status_code == 404

    def test_cannot_cancel_seated(self, client, waiter_headers, restaurant_config):
        reservation = self._book(client)
        client.post(f"/api/reservations/{reservation['id']}/confirm", headers=waiter_headers)
        client.post(f"/api/reservations/{reservation['id']}/seat", headers=waiter_headers)
        response = client.post(f"/api/reservations/{reservation['id']}/cancel", headers=waiter_headers)
        assert response.status_code == 412

    def test_customer_cannot_confirm(self, client, customer_headers, restaurant_config):
        reservation = self._book(client)
        response = client.post(f"/api/reservations/{reservation['id']}/confirm", headers=customer_headers)
        assert response.status_code == 403


class TestTableAssignment:
    def test_assign_table(self, client, waiter_headers, restaurant_config, dining_tables):
        reservation = client.post(
            "/api/reservations", json=reservation_payload(next_weekday(MONDAY), party_size=3)
        ).json()
        response = client.patch(
            f"/api/reservations/{reservation['id']}",
            json={"dining_table_id": dining_tables[1].id, "notes": "Window seat"},
            headers=waiter_headers,
        )
        assert response.status_code == 200
        assert response.json()["dining_table_id"] == dining_tables[1].id
        assert response.json()["notes"] == "Window seat"

    def test_table_too_small(self, client, waiter_headers, restaurant_config, dining_tables):
        reservation = client.post(
            "/api/reservations", json=reservation_payload(next_weekday(MONDAY), party_size=3)
        ).json()
        response = client.patch(
            f"/api/reservations/{reservation['id']}",
            json={"dining_table_id": dining_tables[0].id},
            headers=waiter_headers,
        )
        assert response.status_code == 412

    def test_table_double_booked(self, client, waiter_headers, restaurant_config, dining_tables):
        monday = next_weekday(MONDAY)
        first = client.post("/api/reservations", json=reservation_payload(monday)).json()
        second = client.post(
            "/api/reservations",
            json=reservation_payload(monday, customer_phone="5511112222"),
        ).json()
        table_id = dining_tables[0].id

        assert client.patch(
            f"/api/reservations/{first['id']}", json={"dining_table_id": table_id}, headers=waiter_headers
        ).status_code == 200
        response = client.patch(
            f"/api/reservations/{second['id']}", json={"dining_table_id": table_id}, headers=waiter_headers
        )
        assert response.status_code == 409


class TestReservationReads:
    def test_get_by_phone(self, client, restaurant_config):
        client.post("/api/reservations", json=reservation_payload(next_weekday(MONDAY)))
        response = client.get("/api/reservations/by-phone/55-9876-5432")
        assert response.status_code == 200
        assert len(response.json()) == 1

    def test_get_by_id(self, client, restaurant_config):
        created = client.post("/api/reservations", json=reservation_payload(next_weekday(MONDAY))).json()
        assert client.get(f"/api/reservations/{created['id']}").json()["id"] == created["id"]

    def test_get_by_unknown_id(self, client):
        assert client.get("/api/reservations/999").status_code == 404

    def test_upcoming_excludes_cancelled(self, client, waiter_headers, restaurant_config):
        monday = next_weekday(MONDAY)
        kept = client.post("/api/reservations", json=reservation_payload(monday, time="13:00")).json()
        dropped = client.post("/api/reservations", json=reservation_payload(monday, time="14:00")).json()
        client.post(f"/api/reservations/{dropped['id']}/cancel", headers=waiter_headers)

        response = client.get("/api/reservations/upcoming", headers=waiter_headers)
        assert [r["id"] for r in response.json()] == [kept["id"]]

    def test_today_requires_staff(self, client):
        assert client.get("/api/reservations/today").status_code == 401

    def test_stats(self, client, waiter_headers, restaurant_config):
        monday = next_weekday(MONDAY)
        client.post("/api/reservations", json=reservation_payload(monday, time="19:00", party_size=2))
        client.post("/api/reservations", json=reservation_payload(monday, time="19:30", party_size=4))
        client.post("/api/reservations", json=reservation_payload(monday, time="13:00", party_size=3))

        response = client.get(
            "/api/reservations/stats",
            params={"start_date": monday.isoformat(), "end_date": monday.isoformat()},
            headers=waiter_headers,
        )
        data = response.json()
        assert data["total"] == 3
        assert data["by_status"] == {"PENDING": 3}
        assert data["average_party_size"] == 3.0
        assert data["peak_times"][0] == {"hour": "19:00", "count": 2}
