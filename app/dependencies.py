# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# The MongoStore and StripeGateway are created once in the lifespan handler
# (app/main.py) and kept on app.state; services are built per request on
# top of them. Tests swap them with app.dependency_overrides.
# =============================================================================

from typing import Annotated

from fastapi import Depends, Request

from app.config import settings
from core.services.application_service import ApplicationService
from core.services.review_service import ReviewService
from core.services.scholarship_service import ScholarshipService
from core.services.user_service import UserService
from lib.mongo_client import MongoStore
from lib.stripe_client import StripeGateway


def get_store(request: Request) -> MongoStore:
    """Return the MongoStore opened at startup."""
    return request.app.state.store


def get_payment_gateway(request: Request) -> StripeGateway:
    """Return the StripeGateway created at startup."""
    return request.app.state.payment_gateway


# Type aliases for dependency injection
StoreDep = Annotated[MongoStore, Depends(get_store)]
GatewayDep = Annotated[StripeGateway, Depends(get_payment_gateway)]


def get_user_service(store: StoreDep) -> UserService:
    return UserService(store)


def get_scholarship_service(store: StoreDep) -> ScholarshipService:
    return ScholarshipService(store)


def get_application_service(store: StoreDep, gateway: GatewayDep) -> ApplicationService:
    return ApplicationService(store, gateway, client_url=settings.client_base_url)


def get_review_service(store: StoreDep) -> ReviewService:
    return ReviewService(store)


UserServiceDep = Annotated[UserService, Depends(get_user_service)]
ScholarshipServiceDep = Annotated[ScholarshipService, Depends(get_scholarship_service)]
ApplicationServiceDep = Annotated[ApplicationService, Depends(get_application_service)]
ReviewServiceDep = Annotated[ReviewService, Depends(get_review_service)]
