from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from private_notes.api import deps
from private_notes.logging_config import get_logger
from private_notes.models.auth import LoginRequest, RegisterRequest, TokenResponse
from private_notes.utils.auth_hash import hash_password, verify_password
from private_notes.utils.jwt_auth import create_access_token

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(req: RegisterRequest):
    if deps.users.get(req.user_id) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User exists")

    rec = deps.users.create(req.user_id, hash_password(req.password))
    logger.info("registered user %s", rec.user_id)
    return {"user_id": rec.user_id, "roles": list(rec.roles)}


@router.post("/login", response_model=TokenResponse)
def login(req: LoginRequest):
    rec = deps.users.get(req.user_id)
    if rec is None or not verify_password(req.password, rec.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    return TokenResponse(access_token=create_access_token(deps.settings, rec.user_id))
