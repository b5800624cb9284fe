# =============================================================
# 📚 ROUTE LIBRARY — Gestion de la bibliothèque personnelle
# =============================================================

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from catalog import add_book, list_books, remove_book
from classify import ClassifyClient, get_classify_client
from database import get_session
from models import BookRead, LibraryPage, User
from security import get_current_user

logger = logging.getLogger("uvicorn")

# -------------------------------------------------------------
# 🧩 INITIALISATION
# -------------------------------------------------------------
router = APIRouter(tags=["Library"])

# -------------------------------------------------------------
# 📖 RÉCUPÉRATION DE LA BIBLIOTHÈQUE DE L'UTILISATEUR
# -------------------------------------------------------------
@router.get("/", response_model=LibraryPage)
def get_library(
    sort: Optional[str] = Query(None),
    filter: Optional[str] = Query(None),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Récupère les livres de l'utilisateur connecté.
    `sort` : title | author | classification (title par défaut).
    `filter` : borne basse d'une tranche de 100 codes de classification.
    """
    books = list_books(session, current_user, sort, filter)
    return LibraryPage(books=[BookRead.model_validate(b, from_attributes=True) for b in books])

# -------------------------------------------------------------
# ➕ AJOUT D'UN LIVRE À PARTIR DE SON OWI
# -------------------------------------------------------------
@router.post("/addbook", response_model=BookRead, status_code=201)
def add_item(
    book_id: str = Form(..., alias="bookId"),
    session: Session = Depends(get_session),
    client: ClassifyClient = Depends(get_classify_client),
    current_user: User = Depends(get_current_user),
):
    """
    Résout l'œuvre sur OCLC Classify puis l'ajoute à la bibliothèque.
    """
    try:
        return add_book(session, client, current_user, book_id)
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"❌ Erreur ajout livre : {e}")
        raise HTTPException(status_code=500, detail="Erreur lors de l’ajout")

# -------------------------------------------------------------
# ❌ SUPPRESSION D'UN LIVRE PAR ID
# -------------------------------------------------------------
@router.post("/removebook")
def delete_item(
    book_id: int = Form(..., alias="bookId"),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Supprime un livre appartenant à l'utilisateur connecté.
    """
    try:
        remove_book(session, current_user, book_id)
        return {"ok": True, "message": "✅ Livre supprimé avec succès"}
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"❌ Erreur suppression livre : {e}")
        raise HTTPException(status_code=500, detail="Erreur lors de la suppression")
