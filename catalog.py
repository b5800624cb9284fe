# =============================================================
# 📚 CATALOG — Opérations sur la bibliothèque personnelle
# =============================================================
import logging
from typing import List, Optional

from sqlmodel import Session

from classify import ClassifyClient
from errors import EntryNotFound, Forbidden
from models import Book, SearchResult, User
from queries import build_list_query, build_remove_query

logger = logging.getLogger("uvicorn")


def search(client: ClassifyClient, query: str) -> List[SearchResult]:
    return client.search_by_title(query)


def add_book(session: Session, client: ClassifyClient, owner: User, owi: str) -> Book:
    """Résout l'œuvre auprès d'OCLC puis l'ajoute à la collection de `owner`."""
    found = client.lookup_by_work_id(owi)

    book = Book(
        title=found.title,
        author=found.author,
        owi=found.owi,
        classification=found.classification,
        userId=owner.id,
    )
    session.add(book)
    session.commit()
    session.refresh(book)
    logger.info(f"✅ Livre #{book.id} ajouté pour l'utilisateur #{owner.id}")
    return book


def remove_book(session: Session, owner: User, entry_id: int) -> None:
    book = session.get(Book, entry_id)
    if book is None:
        raise EntryNotFound()
    if book.userId != owner.id:
        logger.warning(
            f"⚠️ Utilisateur #{owner.id} a tenté de supprimer le livre #{entry_id}"
        )
        raise Forbidden()

    session.exec(build_remove_query(owner, entry_id))
    session.commit()
    logger.info(f"🗑️ Livre #{entry_id} supprimé pour l'utilisateur #{owner.id}")


def list_books(
    session: Session,
    owner: User,
    sort: Optional[str] = None,
    filter_lower_bound: Optional[str] = None,
) -> List[Book]:
    return list(session.exec(build_list_query(owner, sort, filter_lower_bound)).all())
