# backend.config
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=True)

"""
Configuration centrale du backend Perdami Store.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Normalise et expose les secrets/URLs Supabase, sécurité cookies, CORS/hosts
- Expose les constantes métier: frais de service par toko, id de la ligne app_settings,
  informations d'événement et de retrait
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _int_env(name: str, default: int) -> int:
    raw = _clean_env(os.getenv(name) or "")
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default

# Supabase: URLs et clés (public/anon/service)
# - SUPABASE_URL peut parfois être sans schéma: on préfixe en https:// si nécessaire
SUPABASE_URL = _clean_env(os.getenv("SUPABASE_URL") or os.getenv("NEXT_PUBLIC_SUPABASE_URL") or "")
SUPABASE_ANON = _clean_env(os.getenv("SUPABASE_ANON_KEY") or os.getenv("SUPABASE_KEY") or "")
SUPABASE_SERVICE_KEY = _clean_env(os.getenv("SUPABASE_SERVICE_KEY") or "")

if SUPABASE_URL and not SUPABASE_URL.startswith("http"):
    SUPABASE_URL = "https://" + SUPABASE_URL
if SUPABASE_URL.endswith("/"):
    SUPABASE_URL = SUPABASE_URL.rstrip("/")

# Cookies / sécurité
COOKIE_SECURE = (os.getenv("COOKIE_SECURE", "false").lower() == "true")

# CORS (dev)
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
ALLOWED_HOSTS = [h.strip() for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h.strip()]


# Tarification: frais de retrait fixes par toko (Rupiah, pas de sous-unité)
SERVICE_FEE_PER_STORE = _int_env("SERVICE_FEE_PER_STORE", 25000)

# Ligne unique de la table app_settings
APP_SETTINGS_ID = _clean_env(os.getenv("APP_SETTINGS_ID") or "default")

# Événement et retrait sur place
EVENT_NAME = _clean_env(os.getenv("EVENT_NAME") or "PIT PERDAMI 2025")
PICKUP_LOCATION = _clean_env(os.getenv("PICKUP_LOCATION") or "Venue PIT PERDAMI 2025")
PICKUP_CITY = _clean_env(os.getenv("PICKUP_CITY") or "Bandung")

ORDER_NUMBER_PREFIX = _clean_env(os.getenv("ORDER_NUMBER_PREFIX") or "ORD")
