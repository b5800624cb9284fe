# =============================================================
# 🚨 ERRORS — Erreurs métier de la bibliothèque
# =============================================================
from fastapi import status


class CatalogError(Exception):
    """Erreur métier ; `detail` est le seul texte renvoyé au client."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Erreur interne"

    def __init__(self, message: str = ""):
        super().__init__(message or self.detail)


# --- Service de classification ---
class TransportError(CatalogError):
    status_code = status.HTTP_502_BAD_GATEWAY
    detail = "Service de classification injoignable"


class ParseError(CatalogError):
    status_code = status.HTTP_502_BAD_GATEWAY
    detail = "Réponse du service de classification invalide"


# --- Sessions & identifiants ---
class Unauthenticated(CatalogError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Non authentifié"


class InvalidCredentials(CatalogError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Nom d'utilisateur ou mot de passe incorrect"


class UsernameTaken(CatalogError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Nom d'utilisateur déjà utilisé"


class InvalidRegistration(CatalogError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Nom d'utilisateur et mot de passe requis"


# --- Collection ---
class Forbidden(CatalogError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Livre non autorisé"


class EntryNotFound(CatalogError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Livre introuvable"
