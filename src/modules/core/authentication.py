"""Firebase ID token authentication for Django REST Framework.

The storefront never stores passwords: customers and the administrator sign
in with Firebase on the client, and every API call carries the resulting ID
token as a ``Bearer`` credential.  Tokens are RS256 JWTs verified with PyJWT
against Google's published signing keys, cached in-memory by
``PyJWKClient`` (300 s) so there is no network call on every request.

Security decisions
------------------
* **Fail Closed**: any decode / validation error returns 401.
* ``algorithms`` is pinned to RS256, never read from the incoming token.
* Audience (project id) **and** issuer are always validated.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import jwt as pyjwt
import structlog
from django.conf import settings
from jwt import PyJWKClient
from jwt.exceptions import ExpiredSignatureError, PyJWTError
from rest_framework.authentication import BaseAuthentication
from rest_framework.exceptions import AuthenticationFailed

logger = structlog.get_logger(__name__)

FIREBASE_ALGORITHM = "RS256"

_jwks_clients: Dict[str, PyJWKClient] = {}


def _get_jwks_client(url: str) -> PyJWKClient:
    client = _jwks_clients.get(url)
    if client is None:
        client = PyJWKClient(url, cache_jwk_set=True, lifespan=300)
        _jwks_clients[url] = client
    return client


class FirebaseUser:
    """Verified identity attached to ``request.user``.

    ``email`` and ``uid`` come from the signed token and are trusted.
    ``is_admin`` reflects the configured custom claim (``admin`` by default).
    """

    is_authenticated = True
    is_active = True
    is_anonymous = False

    def __init__(self, claims: Dict[str, Any], admin_claim: str = "admin") -> None:
        self.claims = claims
        self.uid: str = claims.get("user_id") or claims.get("sub", "")
        self.email: str = claims.get("email") or ""
        self.is_admin: bool = claims.get(admin_claim) is True

    @property
    def pk(self) -> str:
        # Throttling keys requests on ``request.user.pk``.
        return self.uid

    def __str__(self) -> str:  # pragma: no cover
        return self.email or self.uid


class FirebaseIdTokenAuthentication(BaseAuthentication):
    """Validates Firebase ID tokens sent as ``Authorization: Bearer <token>``."""

    keyword = "Bearer"

    def authenticate(self, request):
        """Return ``(FirebaseUser, token)`` or ``None`` when no header is sent."""
        header = request.META.get("HTTP_AUTHORIZATION", "")
        if not header:
            return None

        token = self._extract_token(header)
        claims = self._decode_token(token)
        user = FirebaseUser(claims, admin_claim=settings.FIREBASE_ADMIN_CLAIM)
        logger.info("auth.token_verified", uid=user.uid, is_admin=user.is_admin)
        return (user, token)

    def authenticate_header(self, request):
        """Value for the ``WWW-Authenticate`` response header on 401."""
        return f'{self.keyword} realm="api"'

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _extract_token(self, header: str) -> str:
        parts = header.split()
        if len(parts) != 2 or parts[0].lower() != self.keyword.lower():
            logger.warning("auth.malformed_header")
            raise AuthenticationFailed("Unauthorized")
        return parts[1]

    @staticmethod
    def _decode_token(token: str) -> Dict[str, Any]:
        project_id: Optional[str] = settings.FIREBASE_PROJECT_ID
        if not project_id:
            raise AuthenticationFailed(
                "Identity verification is not configured (FIREBASE_PROJECT_ID missing)."
            )
        try:
            signing_key = _get_jwks_client(
                settings.FIREBASE_JWKS_URL
            ).get_signing_key_from_jwt(token)
            claims = pyjwt.decode(
                token,
                signing_key.key,
                algorithms=[FIREBASE_ALGORITHM],
                audience=project_id,
                issuer=f"https://securetoken.google.com/{project_id}",
            )
        except ExpiredSignatureError as exc:
            logger.warning("auth.token_expired")
            raise AuthenticationFailed("Token expired.") from exc
        except PyJWTError as exc:
            logger.warning("auth.token_invalid", error=str(exc))
            raise AuthenticationFailed("Invalid token.") from exc
        return claims
