# =============================================================
# 🧱 MODELS — Schémas de données SQLModel (Bibliothèque)
# =============================================================
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel
from sqlalchemy import Column, Text
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# -------------------------------------------------------------
# 👤 Utilisateur
# -------------------------------------------------------------
class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True, unique=True)
    hashed_password: str = Field(sa_column=Column(Text, nullable=False))
    created_at: datetime = Field(default_factory=utcnow)


class UserRead(SQLModel):
    id: int
    username: str


# -------------------------------------------------------------
# 📘 Livre de la collection personnelle
# -------------------------------------------------------------
class Book(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    author: str
    owi: str = Field(index=True)
    classification: str
    userId: int = Field(foreign_key="user.id", index=True)
    created_at: datetime = Field(default_factory=utcnow)


class BookRead(SQLModel):
    id: int
    title: str
    author: str
    owi: str
    classification: str
    userId: int
    created_at: datetime


class LibraryPage(BaseModel):
    books: List[BookRead]


# -------------------------------------------------------------
# 🔎 Résultats du service de classification (non persistés)
# -------------------------------------------------------------
class SearchResult(BaseModel):
    title: str
    author: str
    year: Optional[int] = None
    owi: str


class LookupResult(BaseModel):
    title: str
    author: str
    owi: str
    classification: str


class SearchPage(BaseModel):
    query: str
    results: List[SearchResult]
