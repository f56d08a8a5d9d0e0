# backend.config
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=False)

"""
Configuration centrale du relais GoPay.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Normalise et expose les secrets/URLs (passerelle GoPay, Supabase)
- Fournit GatewaySettings (immuable) construit une seule fois au démarrage
- read_secret: point d'injection unique des identifiants (variable ou fichier *_FILE)
"""

def _clean_env(v: Optional[str]) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _normalize_url(url: str) -> str:
    # URL parfois fournie sans schéma: on préfixe en https://
    if url and not url.startswith("http"):
        url = "https://" + url
    return url.rstrip("/")

def _float_env(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = _clean_env(environ.get(name))
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default

def read_secret(name: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """
    Lit un identifiant depuis l'environnement.
    - Priorité à la variable NAME (valeur en ligne).
    - Sinon, NAME_FILE désigne un fichier dont le contenu est la valeur (secrets montés).
    - Retourne "" si aucune source n'est disponible ou lisible.
    """
    env = os.environ if environ is None else environ
    value = _clean_env(env.get(name))
    if value:
        return value
    path = _clean_env(env.get(f"{name}_FILE"))
    if not path:
        return ""
    try:
        return _clean_env(Path(path).read_text(encoding="utf-8"))
    except OSError:
        return ""

@dataclass(frozen=True)
class GatewaySettings:
    """Paramètres de la passerelle GoPay, en lecture seule après le démarrage."""
    base_url: str
    username: str
    password: str
    entity_activity_id: str
    timeout: float = 10.0
    qr_delay: float = 3.0

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self.username and self.password)

def gateway_settings_from_env(environ: Optional[Mapping[str, str]] = None) -> GatewaySettings:
    """
    Construit GatewaySettings à partir de l'environnement (ou d'un mapping explicite, utile en tests).
    """
    env = os.environ if environ is None else environ
    return GatewaySettings(
        base_url=_normalize_url(_clean_env(env.get("API_BASE_URL"))),
        username=read_secret("GOPAY_USERNAME", env),
        password=read_secret("GOPAY_PASSWORD", env),
        entity_activity_id=_clean_env(env.get("ENTITY_ACTIVITY_ID")),
        timeout=_float_env(env, "GATEWAY_TIMEOUT_SECONDS", 10.0),
        qr_delay=_float_env(env, "GATEWAY_QR_DELAY_SECONDS", 3.0),
    )

GATEWAY_SETTINGS = gateway_settings_from_env()

# Supabase (stockage des notifications): URL et clé service-role
SUPABASE_URL = _normalize_url(_clean_env(os.getenv("SUPABASE_URL") or ""))
SUPABASE_SERVICE_KEY = read_secret("SUPABASE_SERVICE_KEY")

# Collections (tables) cibles des webhooks
PAYMENTS_TABLE = _clean_env(os.getenv("PAYMENTS_TABLE")) or "payments"
SETTLEMENTS_TABLE = _clean_env(os.getenv("SETTLEMENTS_TABLE")) or "settlements"

# CORS (le front de la boutique appelle /api/create-invoice)
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

PORT = int(_clean_env(os.getenv("PORT")) or 5001)
