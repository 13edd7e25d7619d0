# =============================================================================
# core/services/application_service.py - Application Lifecycle
# =============================================================================
# Turns a paid checkout session into exactly one application record.
#
# Flow:
# 1. start_checkout(): validate the scholarship, open a Stripe checkout
#    session carrying every field the application needs as metadata.
#    Nothing is written to the database.
# 2. confirm_checkout(): read the session back; if it is paid, upsert the
#    application keyed on the payment intent id (transactionId).
#
# confirm_checkout() is safe to retry (page refresh, redelivered callback):
# the unique index on transactionId plus an atomic $setOnInsert upsert mean
# every retry returns the same application id.
# =============================================================================

import logging
from typing import Any

from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.exceptions import (
    ApplicationNotFoundError,
    ForbiddenError,
    InvalidCheckoutAmountError,
    PaymentNotConfirmedError,
    ScholarshipNotFoundError,
)
from core.models.application import (
    ApplicationStatus,
    CheckoutRequest,
    CheckoutResponse,
    ConfirmationResponse,
)
from lib.mongo_client import MongoStore, parse_object_id, serialize_document, serialize_documents
from lib.stripe_client import PAID, CheckoutSession, StripeGateway
from lib.utils import normalize_email, to_cents, utcnow

logger = logging.getLogger(__name__)

# Metadata keys copied from the checkout session onto the application
METADATA_FIELDS = (
    "scholarshipId",
    "scholarshipName",
    "universityName",
    "scholarshipCategory",
    "degree",
    "userId",
    "userName",
    "userEmail",
)


def _as_float(value: str | None) -> float:
    try:
        return float(value) if value not in (None, "") else 0.0
    except ValueError:
        return 0.0


class ApplicationService:
    """
    Service for the application checkout/confirmation lifecycle and the
    moderator/admin views over applications.
    """

    def __init__(self, store: MongoStore, gateway: StripeGateway, client_url: str):
        self._applications = store.applications
        self._scholarships = store.scholarships
        self._gateway = gateway
        self._client_url = client_url.rstrip("/")

    # -------------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------------

    def start_checkout(self, request: CheckoutRequest, user_email: str) -> CheckoutResponse:
        """
        Create a checkout session for a prospective application.

        Fees default to the scholarship's listed values when the client
        does not send them.

        Raises:
            ScholarshipNotFoundError: unknown scholarshipId
            InvalidCheckoutAmountError: total is zero
        """
        scholarship = self._scholarships.find_one(
            {"_id": parse_object_id(request.scholarshipId)},
            {"description": 0},
        )
        if scholarship is None:
            raise ScholarshipNotFoundError(request.scholarshipId)

        application_fees = (
            request.applicationFees
            if request.applicationFees is not None
            else float(scholarship.get("applicationFees") or 0)
        )
        service_charge = (
            request.serviceCharge
            if request.serviceCharge is not None
            else float(scholarship.get("serviceCharge") or 0)
        )
        total = application_fees + service_charge
        if to_cents(total) <= 0:
            raise InvalidCheckoutAmountError(request.scholarshipId, total)

        email = normalize_email(user_email)
        metadata = {
            "scholarshipId": request.scholarshipId,
            "scholarshipName": scholarship.get("scholarshipName"),
            "universityName": scholarship.get("universityName"),
            "scholarshipCategory": scholarship.get("scholarshipCategory"),
            "degree": scholarship.get("degree"),
            "userId": request.userId,
            "userName": request.userName,
            "userEmail": email,
            "applicationFees": application_fees,
            "serviceCharge": service_charge,
        }

        session = self._gateway.create_checkout_session(
            amount_cents=to_cents(total),
            product_name=f"Application: {scholarship.get('scholarshipName')}",
            description=scholarship.get("universityName"),
            customer_email=email,
            metadata=metadata,
            success_url=f"{self._client_url}/payment-success?session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=f"{self._client_url}/payment-cancelled",
        )
        return CheckoutResponse(url=session.url or "", sessionId=session.id)

    def confirm_checkout(self, session_id: str, user_email: str) -> ConfirmationResponse:
        """
        Materialize the application for a paid checkout session.

        Returns the same response for every retry of the same session.

        Raises:
            ForbiddenError: the session belongs to another user
            PaymentNotConfirmedError: the session is not paid yet
        """
        session = self._gateway.retrieve_checkout_session(session_id)

        owner = normalize_email(session.metadata.get("userEmail"))
        if owner != normalize_email(user_email):
            raise ForbiddenError(
                "Checkout session belongs to another user",
                details={"session_id": session_id},
            )

        transaction_id = session.payment_intent
        if transaction_id:
            existing = self._applications.find_one({"transactionId": transaction_id})
            if existing is not None:
                logger.info(f"Checkout {session_id} already confirmed as {existing['_id']}")
                return self._confirmation(existing)

        if not session.is_paid or not transaction_id:
            logger.info(f"Checkout {session_id} not paid (status={session.payment_status})")
            raise PaymentNotConfirmedError(session_id, session.payment_status)

        document = self._build_application(session)
        try:
            application = self._applications.find_one_and_update(
                {"transactionId": transaction_id},
                {"$setOnInsert": document},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            # Lost a race with a concurrent confirmation; read the winner
            application = self._applications.find_one({"transactionId": transaction_id})

        logger.info(f"Checkout {session_id} confirmed as application {application['_id']}")
        return self._confirmation(application)

    @staticmethod
    def _build_application(session: CheckoutSession) -> dict[str, Any]:
        metadata = session.metadata
        document: dict[str, Any] = {field: metadata.get(field) or None for field in METADATA_FIELDS}
        document.update(
            {
                "userEmail": normalize_email(metadata.get("userEmail")),
                "applicationFees": _as_float(metadata.get("applicationFees")),
                "serviceCharge": _as_float(metadata.get("serviceCharge")),
                "applicationStatus": ApplicationStatus.PENDING.value,
                "paymentStatus": PAID,
                "checkoutSessionId": session.id,
                "feedback": None,
                "applicationDate": utcnow(),
            }
        )
        return document

    @staticmethod
    def _confirmation(application: dict[str, Any]) -> ConfirmationResponse:
        return ConfirmationResponse(
            applicationId=str(application["_id"]),
            transactionId=application["transactionId"],
            paymentStatus=application.get("paymentStatus") or PAID,
        )

    # -------------------------------------------------------------------------
    # Moderation / reporting
    # -------------------------------------------------------------------------

    def set_status(self, application_id: str, status: ApplicationStatus) -> dict[str, Any]:
        updated = self._applications.find_one_and_update(
            {"_id": parse_object_id(application_id)},
            {"$set": {"applicationStatus": status.value}},
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            raise ApplicationNotFoundError(application_id)
        logger.info(f"Application {application_id} status set to {status.value}")
        return serialize_document(updated)

    def list_for_user(self, email: str) -> list[dict[str, Any]]:
        cursor = self._applications.find({"userEmail": normalize_email(email)})
        return serialize_documents(cursor.sort("applicationDate", DESCENDING))

    def list_all(self) -> list[dict[str, Any]]:
        return serialize_documents(self._applications.find().sort("applicationDate", DESCENDING))

    def status_stats(self) -> dict[str, int]:
        """
        Count applications per status.

        Example:
            {"pending": 2, "approved": 1}
        """
        pipeline = [{"$group": {"_id": "$applicationStatus", "count": {"$sum": 1}}}]
        return {
            row["_id"]: row["count"]
            for row in self._applications.aggregate(pipeline)
            if row["_id"] is not None
        }
