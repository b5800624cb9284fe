# =============================================================
# ⚙️ CONFIG — Variables d'environnement (Bibliothèque)
# =============================================================
import os
from dotenv import load_dotenv

# Charger les variables d'environnement (.env en local, Render en prod)
load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# -------------------------------------------------------------
# 🗄️ Base de données
# -------------------------------------------------------------
DATABASE_URL = (os.getenv("DATABASE_URL") or "sqlite:///library.db").strip()

# -------------------------------------------------------------
# 🔐 Sessions
# -------------------------------------------------------------
JWT_SECRET = os.getenv("JWT_SECRET")
ALGORITHM = "HS256"
SESSION_COOKIE = "user"
SESSION_EXPIRE_MINUTES = int(os.getenv("SESSION_EXPIRE_MINUTES", "1440"))
COOKIE_SECURE = _env_bool("COOKIE_SECURE")

# -------------------------------------------------------------
# 📚 Service de classification (OCLC Classify)
# -------------------------------------------------------------
CLASSIFY_BASE_URL = os.getenv(
    "CLASSIFY_BASE_URL", "http://classify.oclc.org/classify2/Classify"
)
CLASSIFY_TIMEOUT_SEC = float(os.getenv("CLASSIFY_TIMEOUT_SEC", "10"))

# -------------------------------------------------------------
# 🌍 CORS
# -------------------------------------------------------------
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]
