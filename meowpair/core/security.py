"""Bearer authentication - Farcaster Quick Auth JWTs."""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Optional

import httpx
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from meowpair.core.config import settings
from meowpair.core.errors import AuthError

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


class QuickAuthVerifier:
    """
    verify(token) → fid | None. Never raises.

    In development a bare positive integer is accepted as the fid so the
    app can be driven without a Farcaster client.
    """

    def __init__(
        self,
        domain: str,
        issuer: str,
        jwks_url: str,
        algorithms: list[str],
        allow_raw_fid: bool = False,
        jwks: Optional[dict[str, Any]] = None,
        timeout_s: float = 5.0,
    ):
        self.domain = domain
        self.issuer = issuer
        self.jwks_url = jwks_url
        self.algorithms = algorithms
        self.allow_raw_fid = allow_raw_fid
        self.timeout_s = timeout_s
        self._jwks = jwks

    def _get_jwks(self) -> dict[str, Any]:
        if self._jwks is None:
            resp = httpx.get(self.jwks_url, timeout=self.timeout_s)
            resp.raise_for_status()
            self._jwks = resp.json()
        return self._jwks

    def verify(self, token: str) -> Optional[int]:
        token = (token or "").strip()
        if not token:
            return None

        if self.allow_raw_fid and token.isdigit():
            fid = int(token)
            if fid > 0:
                logger.debug("Using raw fid %s (development)", fid)
                return fid
            return None

        try:
            payload = jwt.decode(
                token,
                self._get_jwks(),
                algorithms=self.algorithms,
                audience=self.domain,
                issuer=self.issuer,
            )
            fid = int(payload["sub"])
        except (JWTError, httpx.HTTPError, KeyError, ValueError, TypeError) as exc:
            logger.warning("Auth verification failed: %s", exc)
            return None
        return fid if fid > 0 else None


@lru_cache
def get_verifier() -> QuickAuthVerifier:
    return QuickAuthVerifier(
        domain=settings.auth_domain,
        issuer=settings.QUICK_AUTH_ISSUER,
        jwks_url=settings.QUICK_AUTH_JWKS_URL,
        algorithms=settings.quick_auth_algorithms,
        allow_raw_fid=settings.is_development,
    )


def get_current_fid(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    verifier: QuickAuthVerifier = Depends(get_verifier),
) -> int:
    """FastAPI dependency: the caller's fid, or 401."""
    if credentials is None or not credentials.credentials:
        raise AuthError("Missing bearer credentials.")
    fid = verifier.verify(credentials.credentials)
    if fid is None:
        raise AuthError("Invalid bearer credentials.")
    return fid
