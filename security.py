# =============================================================
# 🔐 SECURITY — Sessions & identifiants (Bibliothèque)
# =============================================================
import logging
import os
from datetime import timedelta
from typing import Optional

import bcrypt
from fastapi import Cookie, Depends
from jose import JWTError, jwt
from sqlmodel import Session, select

import config
from database import get_session
from errors import InvalidCredentials, InvalidRegistration, Unauthenticated, UsernameTaken
from models import User, utcnow

logger = logging.getLogger("uvicorn")

JWT_SECRET = config.JWT_SECRET
if not JWT_SECRET:
    JWT_SECRET = os.urandom(48).hex()
    logger.warning("⚠️ JWT_SECRET missing — using temporary key.")

# Comparé quand l'utilisateur n'existe pas, pour un temps de réponse identique
_DUMMY_HASH = bcrypt.hashpw(b"dummy-password", bcrypt.gensalt())


# -------------------------------------------------------------
# 🔑 PASSWORD HELPERS
# -------------------------------------------------------------
def get_password_hash(password: str) -> str:
    """Hache un mot de passe avec troncature stricte à 72 octets (bcrypt natif)."""
    if not password:
        raise ValueError("Password cannot be empty")

    password_bytes = password.encode("utf-8")[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Vérifie un mot de passe avec troncature stricte à 72 octets."""
    try:
        password_bytes = plain_password.encode("utf-8")[:72]
        return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
    except ValueError as e:
        logger.error(f"Erreur vérification bcrypt : {e}")
        return False


# -------------------------------------------------------------
# 🎫 SESSION TOKENS (JWT signé, sub = id utilisateur)
# -------------------------------------------------------------
def issue_session(user: User, expires_delta: Optional[timedelta] = None) -> str:
    expire = utcnow() + (
        expires_delta or timedelta(minutes=config.SESSION_EXPIRE_MINUTES)
    )
    return jwt.encode(
        {"sub": str(user.id), "exp": expire}, JWT_SECRET, algorithm=config.ALGORITHM
    )


def decode_token(token: str) -> dict:
    return jwt.decode(token, JWT_SECRET, algorithms=[config.ALGORITHM])


def authenticate(token: Optional[str], session: Session) -> User:
    """Résout un jeton de session en utilisateur enregistré."""
    if not token:
        raise Unauthenticated("jeton absent")

    try:
        payload = decode_token(token)
    except JWTError as e:
        raise Unauthenticated(f"jeton invalide : {e}")

    try:
        user_id = int(payload.get("sub") or 0)
    except (TypeError, ValueError):
        raise Unauthenticated("sujet du jeton invalide")

    # L'identifiant 0 n'est jamais un utilisateur valide
    if user_id <= 0:
        raise Unauthenticated("sujet du jeton vide")

    user = session.get(User, user_id)
    if user is None or not user.id:
        raise Unauthenticated(f"utilisateur {user_id} introuvable")
    return user


def verify_credentials(session: Session, username: str, password: str) -> User:
    """Même erreur que l'utilisateur soit inconnu ou le mot de passe faux."""
    user = session.exec(select(User).where(User.username == username)).first()
    if user is None:
        bcrypt.checkpw(password.encode("utf-8")[:72], _DUMMY_HASH)
        raise InvalidCredentials()
    if not verify_password(password, user.hashed_password):
        raise InvalidCredentials()
    return user


def register_user(session: Session, username: str, password: str) -> User:
    username = (username or "").strip()
    if not username or not password:
        raise InvalidRegistration()

    existing = session.exec(select(User).where(User.username == username)).first()
    if existing:
        raise UsernameTaken()

    user = User(username=username, hashed_password=get_password_hash(password))
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info(f"✅ Nouvel utilisateur #{user.id}")
    return user


# -------------------------------------------------------------
# 🚪 DÉPENDANCE FASTAPI
# -------------------------------------------------------------
def get_current_user(
    token: Optional[str] = Cookie(default=None, alias=config.SESSION_COOKIE),
    session: Session = Depends(get_session),
) -> User:
    return authenticate(token, session)
