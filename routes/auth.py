# =============================================================
# 🔐 ROUTES AUTH — Inscription, connexion, déconnexion
# =============================================================
import logging

from fastapi import APIRouter, Depends, Form, Response
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

import config
from database import get_session
from errors import InvalidCredentials, UsernameTaken
from models import User, UserRead
from security import get_current_user, issue_session, register_user, verify_credentials

logger = logging.getLogger("uvicorn")

router = APIRouter(tags=["Auth"])


def _set_session_cookie(response: Response, user: User) -> None:
    response.set_cookie(
        key=config.SESSION_COOKIE,
        value=issue_session(user),
        path="/",
        httponly=True,
        samesite="lax",
        secure=config.COOKIE_SECURE,
        max_age=config.SESSION_EXPIRE_MINUTES * 60,
    )


@router.post("/auth/register", response_model=UserRead, status_code=201)
def register(
    response: Response,
    username: str = Form(...),
    password: str = Form(...),
    session: Session = Depends(get_session),
):
    """Crée un compte et ouvre directement la session."""
    try:
        user = register_user(session, username, password)
    except IntegrityError:
        # Inscription concurrente avec le même nom
        session.rollback()
        raise UsernameTaken()

    _set_session_cookie(response, user)
    return UserRead(id=user.id, username=user.username)


@router.post("/auth/login", response_model=UserRead)
def login(
    response: Response,
    form: OAuth2PasswordRequestForm = Depends(),
    session: Session = Depends(get_session),
):
    try:
        user = verify_credentials(session, form.username, form.password)
    except InvalidCredentials:
        logger.warning("⚠️ Échec de connexion")
        raise

    _set_session_cookie(response, user)
    return UserRead(id=user.id, username=user.username)


@router.post("/auth/logout")
def logout(response: Response):
    response.delete_cookie(key=config.SESSION_COOKIE, path="/")
    return {"ok": True}


@router.get("/users/me", response_model=UserRead)
def me(current_user: User = Depends(get_current_user)):
    return UserRead(id=current_user.id, username=current_user.username)
