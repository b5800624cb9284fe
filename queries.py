# =============================================================
# 🧮 QUERIES — Requêtes sur la collection d'un utilisateur
# =============================================================
"""
Toutes les requêtes sont limitées aux livres du propriétaire.

Les valeurs venant de la requête HTTP ne sont jamais insérées dans le texte
SQL : le tri passe par une liste blanche de colonnes et la borne du filtre
est un paramètre lié de type entier.
"""
import re
from typing import Optional, Union

from sqlalchemy import Float, case, cast, delete
from sqlmodel import select

from models import Book, User

MAX_LIST_SIZE = 1000
FILTER_WIDTH = 100
DEFAULT_SORT = "title"
# Les codes Dewey vont de 000 à 999
FILTER_MIN = -1000
FILTER_MAX = 1000

_INTEGER = re.compile(r"[+-]?[0-9]+", re.ASCII)
NUMERIC_CODE = r"^[0-9]+(\.[0-9]+)?$"

# NULL pour les codes non numériques (« [Fic] », « B »...)
_classification_num = case(
    (Book.classification.regexp_match(NUMERIC_CODE), cast(Book.classification, Float)),
    else_=None,
)

SORT_COLUMNS = {
    "title": (Book.title,),
    "author": (Book.author,),
    "classification": (_classification_num.nulls_last(), Book.classification),
}


def parse_filter_bound(raw: Union[str, int, None]) -> Optional[int]:
    """Borne inférieure du filtre, ou None si la valeur n'est pas un entier
    décimal ASCII compris entre FILTER_MIN et FILTER_MAX."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        value = raw
    else:
        text = str(raw).strip()
        if not _INTEGER.fullmatch(text):
            return None
        value = int(text)
    if not FILTER_MIN <= value <= FILTER_MAX:
        return None
    return value


def build_list_query(
    owner: User,
    sort_key: Optional[str] = DEFAULT_SORT,
    filter_lower_bound: Union[str, int, None] = None,
):
    order = SORT_COLUMNS.get(sort_key or DEFAULT_SORT, SORT_COLUMNS[DEFAULT_SORT])

    query = select(Book).where(Book.userId == owner.id)

    lower = parse_filter_bound(filter_lower_bound)
    if lower is not None:
        # [lower, lower + 100)
        query = query.where(
            _classification_num >= lower,
            _classification_num < lower + FILTER_WIDTH,
        )

    return query.order_by(*order, Book.id).limit(MAX_LIST_SIZE)


def build_remove_query(owner: User, entry_id: int):
    return delete(Book).where(Book.id == entry_id, Book.userId == owner.id)
