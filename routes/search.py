# =============================================================
# 🔎 ROUTE SEARCH — Recherche d'œuvres sur OCLC Classify
# =============================================================
from fastapi import APIRouter, Depends, Query

from catalog import search
from classify import ClassifyClient, get_classify_client
from models import SearchPage, User
from security import get_current_user

router = APIRouter(tags=["Search"])


@router.get("/search", response_model=SearchPage)
def search_works(
    q: str = Query("", alias="search"),
    client: ClassifyClient = Depends(get_classify_client),
    current_user: User = Depends(get_current_user),
):
    """
    Recherche par titre. Les erreurs du service de classification
    remontent en 502 via le gestionnaire d'erreurs de l'application.
    """
    return SearchPage(query=q, results=search(client, q))
