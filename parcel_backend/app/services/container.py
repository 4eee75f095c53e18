"""
Service container.

Long-lived clients for external collaborators are built once at startup,
stored on ``app.state`` and handed to request handlers through dependencies.
"""

from dataclasses import dataclass

from fastapi import Request

from parcel_backend.app.core.config import Settings
from parcel_backend.app.services.identity import FirebaseIdentityVerifier, IdentityVerifier
from parcel_backend.app.services.payment_gateway import PaymentGateway, StripePaymentGateway


@dataclass
class ServiceContainer:
    identity_verifier: IdentityVerifier
    payment_gateway: PaymentGateway


def build_services(settings: Settings) -> ServiceContainer:
    return ServiceContainer(
        identity_verifier=FirebaseIdentityVerifier(settings.firebase_service_key),
        payment_gateway=StripePaymentGateway(settings.stripe_secret_key, currency=settings.payment_currency),
    )


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services


def get_identity_verifier(request: Request) -> IdentityVerifier:
    return get_services(request).identity_verifier


def get_payment_gateway(request: Request) -> PaymentGateway:
    return get_services(request).payment_gateway
