"""Shared-secret bearer authentication for mutating endpoints."""
from __future__ import annotations

import hmac

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .errors import AuthError

auth_scheme = HTTPBearer(auto_error=False)


def secret_matches(token: str, secret: str) -> bool:
    return hmac.compare_digest(token.encode("utf-8"), secret.encode("utf-8"))


def require_secret(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(auth_scheme),
) -> None:
    if credentials is None or credentials.scheme != "Bearer":
        raise AuthError()

    secret = request.app.state.settings.secret_key
    if not secret_matches(credentials.credentials, secret):
        raise AuthError()
