"""
Federated identity verification.

Wraps the Firebase Admin SDK behind a small verifier interface so request
handling never touches the SDK directly and tests can inject a fake.
"""

import base64
import json
import logging
import os
from typing import Any, Dict, Optional, Protocol

import firebase_admin
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials
from starlette.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "parcel-backend"


class IdentityVerificationError(Exception):
    """Raised when a federated ID token cannot be verified."""


class IdentityVerifier(Protocol):
    async def verify(self, token: str) -> Dict[str, Any]:
        """Return the verified token claims or raise IdentityVerificationError."""
        ...


def load_service_account(service_key: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Load a Firebase service account from a JSON file path or a base64 string.

    Returns None when no key is configured (Application Default Credentials apply).
    """
    if not service_key:
        return None
    if service_key.endswith(".json") or os.path.exists(service_key):
        with open(service_key, "r", encoding="utf-8") as fh:
            return json.load(fh)
    return json.loads(base64.b64decode(service_key).decode("utf-8"))


class FirebaseIdentityVerifier:
    """Verifies Firebase ID tokens with a lazily initialized Admin SDK app."""

    def __init__(self, service_key: Optional[str] = None):
        self.service_key = service_key
        self._app = None

    def _get_app(self):
        if self._app is not None:
            return self._app
        try:
            self._app = firebase_admin.get_app(FIREBASE_APP_NAME)
        except ValueError:
            service_account = load_service_account(self.service_key)
            cred = credentials.Certificate(service_account) if service_account else None
            self._app = firebase_admin.initialize_app(cred, name=FIREBASE_APP_NAME)
            logger.info("Firebase Admin SDK initialized (service account: %s)", bool(service_account))
        return self._app

    def _verify_sync(self, token: str) -> Dict[str, Any]:
        return firebase_auth.verify_id_token(token, app=self._get_app())

    async def verify(self, token: str) -> Dict[str, Any]:
        try:
            return await run_in_threadpool(self._verify_sync, token)
        except Exception as e:
            logger.warning("Firebase token verification failed: %s", type(e).__name__)
            raise IdentityVerificationError(str(e)) from e
