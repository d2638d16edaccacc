"""Dependency injection for FastAPI endpoints"""

import logging

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from finance_tracker.domain.exceptions import AuthenticationError
from finance_tracker.infrastructure.database.models import User
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.observability.metrics import record_auth
from finance_tracker.infrastructure.security import CredentialService

bearer_scheme = HTTPBearer(auto_error=False)


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_credential_service(db: Session = Depends(get_db)) -> CredentialService:
    return CredentialService(db)


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    credential_service: CredentialService = Depends(get_credential_service),
) -> User:
    """Resolve the bearer token to a user or fail with 401"""
    if credentials is None or credentials.scheme.lower() != "bearer":
        record_auth("verify", success=False)
        raise HTTPException(
            status_code=401,
            detail="Authorization header missing",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return credential_service.resolve_access_token(credentials.credentials)
    except AuthenticationError as e:
        record_auth("verify", success=False)
        logging.warning(f"Rejected token: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=401, detail=str(e), headers={"WWW-Authenticate": "Bearer"})
