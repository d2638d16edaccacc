"""/v1/auth - registration, login, token refresh and verification"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from finance_tracker.api.v1.schemas import (
    AuthResponse,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    UserSchema,
    VerifyResponse,
)
from finance_tracker.api.dependencies import get_current_user, get_request_id
from finance_tracker.domain.exceptions import AuthenticationError, DuplicateUserError, ValidationError
from finance_tracker.infrastructure.database.models import User
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.observability.metrics import record_auth
from finance_tracker.infrastructure.security import CredentialService, TokenPair

router = APIRouter()


def _user_schema(user: User) -> UserSchema:
    return UserSchema(id=str(user.id), name=user.name, email=user.email)


def _auth_response(message: str, user: User, tokens: TokenPair) -> AuthResponse:
    return AuthResponse(
        message=message,
        user=_user_schema(user),
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        expires_in=tokens.expires_in,
    )


@router.post("/auth/register", response_model=AuthResponse, status_code=201)
def register(body: RegisterRequest, request: Request, db: Session = Depends(get_db)):
    """
    Create an account and return a token pair.

    Errors:
        400: Password too short
        409: Email already registered
    """
    request_id = get_request_id(request)
    try:
        user, tokens = CredentialService(db).register(body.name, body.email, body.password)
        db.commit()
    except ValidationError as e:
        db.rollback()
        record_auth("register", success=False)
        raise HTTPException(status_code=400, detail=str(e))
    except DuplicateUserError as e:
        db.rollback()
        record_auth("register", success=False)
        logging.warning(f"Duplicate registration: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail=str(e))

    record_auth("register", success=True)
    return _auth_response("User created successfully", user, tokens)


@router.post("/auth/login", response_model=AuthResponse)
def login(body: LoginRequest, request: Request, db: Session = Depends(get_db)):
    """Exchange email and password for a token pair"""
    try:
        user, tokens = CredentialService(db).login(body.email, body.password)
        db.commit()
    except AuthenticationError as e:
        db.rollback()
        record_auth("login", success=False)
        logging.warning(f"Login failed: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=401, detail=str(e))

    record_auth("login", success=True)
    return _auth_response("Login successful", user, tokens)


@router.post("/auth/refresh", response_model=TokenResponse)
def refresh(body: RefreshRequest, db: Session = Depends(get_db)):
    """Rotate a refresh token into a new token pair"""
    try:
        tokens = CredentialService(db).refresh(body.refresh_token)
        db.commit()
    except AuthenticationError as e:
        db.rollback()
        record_auth("refresh", success=False)
        raise HTTPException(status_code=401, detail=str(e))

    record_auth("refresh", success=True)
    return TokenResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        expires_in=tokens.expires_in,
    )


@router.get("/auth/verify", response_model=VerifyResponse)
def verify(current_user: User = Depends(get_current_user)):
    record_auth("verify", success=True)
    return VerifyResponse(user=_user_schema(current_user))
