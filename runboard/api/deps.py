"""Shared request dependencies."""

from __future__ import annotations

import os
import secrets

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from ..services import Services

security = HTTPBasic()


def _admin_creds():
    # Read fresh each request so .env changes apply after restart
    return os.getenv("ADMIN_USER", "admin"), os.getenv("ADMIN_PASS", "changeme")


def require_admin(credentials: HTTPBasicCredentials = Depends(security)) -> bool:
    admin_user, admin_pass = _admin_creds()
    ok_user = secrets.compare_digest(credentials.username.encode(), admin_user.encode())
    ok_pass = secrets.compare_digest(credentials.password.encode(), admin_pass.encode())
    if not (ok_user and ok_pass):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )
    return True


def get_services(request: Request) -> Services:
    return request.app.state.services


def client_key(request: Request) -> str:
    """Rate-limit key: first forwarded-for address, else the peer address."""

    forwarded = request.headers.get("x-forwarded-for", "")
    first = forwarded.split(",")[0].strip()
    if first:
        return first
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


__all__ = ["client_key", "get_services", "require_admin", "security"]
