# =============================================================
# 📚 CLASSIFY — Client du service de classification OCLC
# =============================================================
"""
Client sans état du service OCLC Classify.

Chaque appel est une requête GET neuve (ni cache, ni nouvel essai) :
    <base>?summary=true&title=<texte>   → liste de SearchResult
    <base>?summary=true&owi=<identifiant> → un LookupResult

Le client extrait un jeu d'attributs fixe du document XML et échoue
proprement (TransportError / ParseError) si la forme est inattendue.
"""
import logging
import xml.etree.ElementTree as ET
from typing import List, Optional

import requests

from config import CLASSIFY_BASE_URL, CLASSIFY_TIMEOUT_SEC
from errors import ParseError, TransportError
from models import LookupResult, SearchResult

logger = logging.getLogger("uvicorn")

# Codes de réponse OCLC signifiant « rien trouvé »
NOTHING_FOUND_CODES = {"100", "101", "102"}
UPSTREAM_ERROR_CODE = "200"


def _local(tag: str) -> str:
    """Nom d'élément sans l'espace de noms `{http://classify.oclc.org}`."""
    return tag.rsplit("}", 1)[-1]


def _child(element: ET.Element, name: str) -> Optional[ET.Element]:
    for child in element:
        if _local(child.tag) == name:
            return child
    return None


def _children(element: ET.Element, name: str) -> List[ET.Element]:
    return [child for child in element if _local(child.tag) == name]


def _path(element: ET.Element, *names: str) -> Optional[ET.Element]:
    current: Optional[ET.Element] = element
    for name in names:
        if current is None:
            return None
        current = _child(current, name)
    return current


def _required(element: ET.Element, attr: str) -> str:
    value = element.get(attr)
    if value is None or not value.strip():
        raise ParseError(f"attribut <{_local(element.tag)} {attr}> manquant")
    return value.strip()


def _year(work: ET.Element) -> Optional[int]:
    hyr = work.get("hyr")
    if hyr is None or not hyr.strip():
        return None
    try:
        return int(hyr)
    except ValueError:
        raise ParseError(f"année invalide : {hyr!r}")


def _search_result(work: ET.Element) -> SearchResult:
    return SearchResult(
        title=_required(work, "title"),
        author=work.get("author", ""),
        year=_year(work),
        owi=_required(work, "owi"),
    )


class ClassifyClient:
    def __init__(
        self,
        base_url: str = CLASSIFY_BASE_URL,
        timeout: float = CLASSIFY_TIMEOUT_SEC,
        http=None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        # `requests` par défaut ; une requests.Session (ou un bouchon) sinon
        self.http = http or requests

    # ---------------------------------------------------------
    # 🌐 Transport
    # ---------------------------------------------------------
    def _fetch(self, key: str, value: str) -> bytes:
        params = {"summary": "true", key: value}
        logger.debug(f"OCLC Classify GET {self.base_url} {key}={value!r}")
        try:
            response = self.http.get(self.base_url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"⚠️ OCLC Classify injoignable ({key}={value!r}) : {e}")
            raise TransportError(str(e)) from e

        if response.status_code != 200:
            # Le corps est tout de même analysé
            logger.warning(f"⚠️ OCLC Classify a répondu {response.status_code}")
        return response.content

    def _parse(self, body: bytes) -> ET.Element:
        try:
            root = ET.fromstring(body)
        except ET.ParseError as e:
            logger.warning(f"⚠️ Réponse OCLC illisible : {e}")
            raise ParseError(str(e)) from e

        if _local(root.tag) != "classify":
            raise ParseError(f"élément racine inattendu : <{_local(root.tag)}>")

        code = self._response_code(root)
        if code == UPSTREAM_ERROR_CODE:
            raise ParseError("erreur interne du service de classification")
        return root

    @staticmethod
    def _response_code(root: ET.Element) -> Optional[str]:
        response = _child(root, "response")
        return response.get("code") if response is not None else None

    # ---------------------------------------------------------
    # 🔎 Recherche par titre
    # ---------------------------------------------------------
    def search_by_title(self, query: str) -> List[SearchResult]:
        """Recherche les œuvres dont le titre correspond, dans l'ordre du serveur."""
        root = self._parse(self._fetch("title", query))

        works = _child(root, "works")
        if works is not None:
            return [_search_result(work) for work in _children(works, "work")]

        # Réponse « résumé » d'une œuvre unique
        work = _child(root, "work")
        if work is not None:
            return [_search_result(work)]

        if self._response_code(root) in NOTHING_FOUND_CODES:
            return []
        raise ParseError("ni <works> ni <work> dans la réponse")

    # ---------------------------------------------------------
    # 📖 Classification d'une œuvre (OWI)
    # ---------------------------------------------------------
    def lookup_by_work_id(self, owi: str) -> LookupResult:
        """Résout une œuvre et sa classification Dewey la plus populaire."""
        root = self._parse(self._fetch("owi", owi))

        if self._response_code(root) in NOTHING_FOUND_CODES:
            raise ParseError(f"aucune notice de classification pour {owi!r}")

        work = _child(root, "work")
        if work is None:
            raise ParseError("élément <work> manquant")

        most_popular = _path(root, "recommendations", "ddc", "mostPopular")
        if most_popular is None:
            raise ParseError("élément <recommendations><ddc><mostPopular> manquant")

        return LookupResult(
            title=_required(work, "title"),
            author=work.get("author", ""),
            owi=_required(work, "owi"),
            classification=_required(most_popular, "sfa"),
        )


def get_classify_client() -> ClassifyClient:
    return ClassifyClient()
