# =============================================================================
# tests/test_applications.py - Application Lifecycle Tests
# =============================================================================
# Checkout -> confirmation -> moderation, with the Stripe gateway mocked.
# =============================================================================

import functools
import threading
import time
from datetime import datetime, timezone
from unittest.mock import patch

import anyio
import httpx
import pytest
from pymongo.errors import DuplicateKeyError

from app.main import app
from lib.stripe_client import CheckoutSession

STUDENT = "ada@example.com"


@pytest.fixture
def student(add_user):
    return add_user(STUDENT, role="student", name="Ada")


@pytest.fixture
def paid_session(add_scholarship):
    """A paid checkout session for the sample scholarship."""
    scholarship_id = add_scholarship()
    return CheckoutSession(
        id="cs_test_123",
        payment_status="paid",
        payment_intent="pi_test_456",
        metadata={
            "scholarshipId": scholarship_id,
            "scholarshipName": "Global Excellence Award",
            "universityName": "Engineering Institute",
            "scholarshipCategory": "Full fund",
            "degree": "Masters",
            "userId": "u-1",
            "userName": "Ada",
            "userEmail": STUDENT,
            "applicationFees": "50.0",
            "serviceCharge": "10.0",
        },
    )


# =============================================================================
# Checkout
# =============================================================================

class TestStartCheckout:
    """POST /application"""

    def test_returns_checkout_url_and_writes_nothing(
        self, client, store, gateway, student, add_scholarship, auth_headers
    ):
        scholarship_id = add_scholarship()

        response = client.post(
            "/application",
            json={"scholarshipId": scholarship_id, "userId": student, "userName": "Ada"},
            headers=auth_headers(STUDENT),
        )

        assert response.status_code == 200
        assert response.json() == {
            "url": "https://checkout.stripe.com/c/pay/cs_test_123",
            "sessionId": "cs_test_123",
        }
        assert store.applications.count_documents({}) == 0

    def test_charges_fees_plus_service_charge(self, client, gateway, student, add_scholarship, auth_headers):
        scholarship_id = add_scholarship(applicationFees=45.5, serviceCharge=4.25)

        client.post(
            "/application",
            json={"scholarshipId": scholarship_id, "userId": student},
            headers=auth_headers(STUDENT),
        )

        kwargs = gateway.create_checkout_session.call_args.kwargs
        assert kwargs["amount_cents"] == 4975
        assert kwargs["customer_email"] == STUDENT
        assert kwargs["metadata"]["scholarshipId"] == scholarship_id
        assert kwargs["metadata"]["userEmail"] == STUDENT
        assert kwargs["metadata"]["universityName"] == "Engineering Institute"
        assert kwargs["success_url"] == (
            "http://localhost:5173/payment-success?session_id={CHECKOUT_SESSION_ID}"
        )
        assert kwargs["cancel_url"] == "http://localhost:5173/payment-cancelled"

    def test_client_supplied_fees_take_precedence(self, client, gateway, student, add_scholarship, auth_headers):
        scholarship_id = add_scholarship()

        client.post(
            "/application",
            json={"scholarshipId": scholarship_id, "applicationFees": 20, "serviceCharge": 5},
            headers=auth_headers(STUDENT),
        )

        assert gateway.create_checkout_session.call_args.kwargs["amount_cents"] == 2500

    def test_unknown_scholarship(self, client, gateway, student, auth_headers):
        response = client.post(
            "/application",
            json={"scholarshipId": "65f1c0ffee0000000000abcd"},
            headers=auth_headers(STUDENT),
        )

        assert response.status_code == 404
        gateway.create_checkout_session.assert_not_called()

    def test_zero_total(self, client, gateway, student, add_scholarship, auth_headers):
        scholarship_id = add_scholarship(applicationFees=0, serviceCharge=0)

        response = client.post(
            "/application",
            json={"scholarshipId": scholarship_id},
            headers=auth_headers(STUDENT),
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_CHECKOUT_AMOUNT"
        gateway.create_checkout_session.assert_not_called()


# =============================================================================
# Confirmation
# =============================================================================

class TestConfirmCheckout:
    """POST /application-success"""

    def test_creates_pending_application(self, client, store, gateway, student, paid_session, auth_headers):
        gateway.retrieve_checkout_session.return_value = paid_session

        response = client.post(
            "/application-success",
            params={"session_id": "cs_test_123"},
            headers=auth_headers(STUDENT),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["transactionId"] == "pi_test_456"
        assert body["paymentStatus"] == "paid"

        application = store.applications.find_one({"transactionId": "pi_test_456"})
        assert str(application["_id"]) == body["applicationId"]
        assert application["applicationStatus"] == "pending"
        assert application["paymentStatus"] == "paid"
        assert application["userEmail"] == STUDENT
        assert application["applicationFees"] == 50.0
        assert application["serviceCharge"] == 10.0
        assert application["applicationDate"] is not None

    def test_confirming_twice_creates_one_application(
        self, client, store, gateway, student, paid_session, auth_headers
    ):
        gateway.retrieve_checkout_session.return_value = paid_session
        headers = auth_headers(STUDENT)

        first = client.post("/application-success?session_id=cs_test_123", headers=headers)
        second = client.post("/application-success?session_id=cs_test_123", headers=headers)

        assert first.status_code == second.status_code == 200
        assert first.json() == second.json()
        assert store.applications.count_documents({"transactionId": "pi_test_456"}) == 1

    def test_unpaid_session_creates_nothing(self, client, store, gateway, student, paid_session, auth_headers):
        gateway.retrieve_checkout_session.return_value = CheckoutSession(
            id="cs_test_123",
            payment_status="unpaid",
            payment_intent=None,
            metadata=paid_session.metadata,
        )

        response = client.post("/application-success?session_id=cs_test_123", headers=auth_headers(STUDENT))

        assert response.status_code == 402
        assert response.json()["code"] == "PAYMENT_NOT_CONFIRMED"
        assert store.applications.count_documents({}) == 0

    def test_session_of_another_student(self, client, store, gateway, add_user, paid_session, auth_headers):
        add_user("mallory@example.com", role="student")
        gateway.retrieve_checkout_session.return_value = paid_session

        response = client.post(
            "/application-success?session_id=cs_test_123",
            headers=auth_headers("mallory@example.com"),
        )

        assert response.status_code == 403
        assert store.applications.count_documents({}) == 0

    def test_concurrent_confirmation_returns_the_winner(
        self, client, store, gateway, student, paid_session, auth_headers
    ):
        gateway.retrieve_checkout_session.return_value = paid_session
        winner = {}

        def lose_the_race(*args, **kwargs):
            winner["id"] = store.applications.insert_one(
                {"transactionId": "pi_test_456", "userEmail": STUDENT, "paymentStatus": "paid"}
            ).inserted_id
            raise DuplicateKeyError("E11000 transactionId")

        with patch.object(type(store.applications), "find_one_and_update", side_effect=lose_the_race):
            response = client.post("/application-success?session_id=cs_test_123", headers=auth_headers(STUDENT))

        assert response.status_code == 200
        assert response.json()["applicationId"] == str(winner["id"])
        assert response.json()["transactionId"] == "pi_test_456"
        assert store.applications.count_documents({"transactionId": "pi_test_456"}) == 1

    def test_session_id_is_required(self, client, student, auth_headers):
        response = client.post("/application-success", headers=auth_headers(STUDENT))

        assert response.status_code == 422


# =============================================================================
# Moderation and reporting
# =============================================================================

def _insert_application(store, status: str, email: str = STUDENT, tx: str | None = None, day: int = 1):
    return store.applications.insert_one(
        {
            "scholarshipId": "65f1c0ffee0000000000abcd",
            "userEmail": email,
            "transactionId": tx or f"pi_{status}_{day}_{email}",
            "applicationStatus": status,
            "paymentStatus": "paid",
            "applicationDate": datetime(2024, 2, day, tzinfo=timezone.utc),
        }
    ).inserted_id


class TestModeration:
    """PATCH /applications/{id}, GET /applications/moderator, GET /applications"""

    def test_moderator_sets_status(self, client, store, add_user, auth_headers):
        add_user("mod@example.com", role="moderator")
        application_id = _insert_application(store, "pending")

        response = client.patch(
            f"/applications/{application_id}",
            json={"applicationStatus": "approved"},
            headers=auth_headers("mod@example.com"),
        )

        assert response.status_code == 200
        assert response.json()["applicationStatus"] == "approved"
        stored = store.applications.find_one({"_id": application_id})
        assert stored["applicationStatus"] == "approved"
        assert stored["paymentStatus"] == "paid"

    def test_unknown_status(self, client, store, add_user, auth_headers):
        add_user("mod@example.com", role="moderator")
        application_id = _insert_application(store, "pending")

        response = client.patch(
            f"/applications/{application_id}",
            json={"applicationStatus": "maybe"},
            headers=auth_headers("mod@example.com"),
        )

        assert response.status_code == 422

    def test_missing_application(self, client, add_user, auth_headers):
        add_user("mod@example.com", role="moderator")

        response = client.patch(
            "/applications/65f1c0ffee0000000000abcd",
            json={"applicationStatus": "approved"},
            headers=auth_headers("mod@example.com"),
        )

        assert response.status_code == 404

    def test_moderator_lists_all(self, client, store, add_user, auth_headers):
        add_user("mod@example.com", role="moderator")
        _insert_application(store, "pending", day=1)
        _insert_application(store, "approved", email="grace@example.com", day=2)

        response = client.get("/applications/moderator", headers=auth_headers("mod@example.com"))

        assert response.status_code == 200
        assert [a["userEmail"] for a in response.json()] == ["grace@example.com", STUDENT]

    def test_student_lists_own(self, client, store, student, auth_headers):
        _insert_application(store, "pending", day=1)
        _insert_application(store, "approved", email="grace@example.com", day=2)

        response = client.get(f"/applications?email={STUDENT}", headers=auth_headers(STUDENT))

        assert response.status_code == 200
        assert [a["userEmail"] for a in response.json()] == [STUDENT]


class TestStatusStats:
    """GET /applications/application-status/stats"""

    def test_counts_per_status(self, client, store, add_user, auth_headers):
        add_user("admin@example.com", role="admin")
        _insert_application(store, "pending", day=1)
        _insert_application(store, "pending", day=2)
        _insert_application(store, "approved", day=3)

        response = client.get(
            "/applications/application-status/stats",
            headers=auth_headers("admin@example.com"),
        )

        assert response.status_code == 200
        assert response.json() == {"pending": 2, "approved": 1}

    def test_no_applications(self, client, add_user, auth_headers):
        add_user("admin@example.com", role="admin")

        response = client.get(
            "/applications/application-status/stats",
            headers=auth_headers("admin@example.com"),
        )

        assert response.json() == {}


# =============================================================================
# Concurrency
# =============================================================================

@pytest.fixture
def anyio_backend():
    return "asyncio"


class TestSlowPaymentProcessor:
    """A slow gateway call must not hold up unrelated requests."""

    @pytest.mark.anyio
    async def test_liveness_answers_while_confirmation_waits(
        self, client, gateway, student, paid_session, auth_headers
    ):
        started = threading.Event()

        def slow_retrieve(session_id):
            started.set()
            time.sleep(1.0)
            return paid_session

        gateway.retrieve_checkout_session.side_effect = slow_retrieve

        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http:
            async with anyio.create_task_group() as tg:
                tg.start_soon(
                    functools.partial(
                        http.post,
                        "/application-success?session_id=cs_test_123",
                        headers=auth_headers(STUDENT),
                    )
                )
                assert await anyio.to_thread.run_sync(started.wait, 5)

                began = time.monotonic()
                response = await http.get("/health/live")
                elapsed = time.monotonic() - began

        assert response.status_code == 200
        assert elapsed < 0.5
