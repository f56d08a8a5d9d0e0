"""
Lifespan FastAPI: initialisation/arrêt des ressources partagées.
- Signale une configuration GoPay/Supabase incomplète (le relais démarre quand même).
- Initialise FastAPILimiter (Redis) avec options de test (fakeredis).
- Variables d’environnement supportées:
  - DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS=1: désactive complètement (tests)
  - USE_FAKE_REDIS_FOR_TESTS=1: utilise fakeredis (tests)
  - LOCAL_RATE_LIMIT_FALLBACK=1: active un fallback local si l’init échoue
"""
import os
import logging
from contextlib import asynccontextmanager
from redis import asyncio as redis_asyncio
from fastapi import FastAPI
from fastapi_limiter import FastAPILimiter
from backend.config import GATEWAY_SETTINGS, SUPABASE_URL, SUPABASE_SERVICE_KEY

try:
    from fakeredis.aioredis import FakeRedis  # tests only
except ImportError:
    FakeRedis = None

def log_configuration(logger: logging.Logger) -> None:
    if not GATEWAY_SETTINGS.configured:
        logger.warning("GoPay gateway not configured (API_BASE_URL/GOPAY_USERNAME/GOPAY_PASSWORD)")
    if not GATEWAY_SETTINGS.entity_activity_id:
        logger.warning("ENTITY_ACTIVITY_ID missing: invoices will be rejected by GoPay")
    if not SUPABASE_URL or not SUPABASE_SERVICE_KEY:
        logger.warning("Supabase not configured (SUPABASE_URL/SUPABASE_SERVICE_KEY): notifications cannot be stored")

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Vérifie la configuration puis configure le rate limiting et gère les fallbacks.
    - En cas d’échec de Redis et sans fallback, le rate limiting est désactivé proprement.
    - Les logs indiquent l’état effectif (enabled/disabled) pour observabilité.
    """
    logger = logging.getLogger("uvicorn.error")
    log_configuration(logger)
    if os.getenv("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS") == "1":
        app.state.rate_limit_enabled = False
        logger.info("Rate limiting disabled by DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS")
        yield
        return

    try:
        use_fake = os.getenv("USE_FAKE_REDIS_FOR_TESTS") == "1"
        if use_fake:
            if not FakeRedis:
                raise RuntimeError("USE_FAKE_REDIS_FOR_TESTS=1 mais fakeredis n'est pas installé.")
            r = FakeRedis(decode_responses=True)
        else:
            redis_url = os.getenv("RATE_LIMIT_REDIS_URL", "redis://127.0.0.1:6379/0")
            r = redis_asyncio.from_url(redis_url, encoding="utf-8", decode_responses=True)

        await FastAPILimiter.init(r)
        app.state.rate_limit_enabled = True
        logger.info("Rate limiting enabled")
    except Exception as e:
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            app.state.rate_limit_enabled = True
            logger.warning(f"Rate limiting falling back to local in-memory due to init error: {e}")
        else:
            app.state.rate_limit_enabled = False
            logger.warning(f"Rate limiting disabled due to init error: {e}")

    yield
