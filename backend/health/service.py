from urllib.parse import urlparse
import socket
from backend.config import SUPABASE_URL, PAYMENTS_TABLE, SETTLEMENTS_TABLE, GATEWAY_SETTINGS
import backend.infra.supabase_client as supabase_client

def _check_table(client, name: str):
    try:
        res = client.table(name).select("*").limit(1).execute()
        cnt = len(res.data or [])
        return {"ok": True, "rows": cnt}
    except Exception as e:
        return {"ok": False, "error": str(e)}

def health_supabase_info():
    effective_url = SUPABASE_URL
    parsed = urlparse(effective_url) if effective_url else None
    hostname = parsed.hostname if parsed else None
    dns_ok = None
    dns_error = None
    if hostname:
        try:
            socket.getaddrinfo(hostname, 443)
            dns_ok = True
        except OSError as e:
            dns_ok = False
            dns_error = str(e)

    info = {
        "supabase_url": effective_url,
        "hostname": hostname,
        "dns_ok": dns_ok,
        "dns_error": dns_error,
        "connect_ok": False,
        "error": None,
        "tables": {}
    }
    try:
        client = supabase_client.get_service_supabase()
        for t in [PAYMENTS_TABLE, SETTLEMENTS_TABLE]:
            info["tables"][t] = _check_table(client, t)
        info["connect_ok"] = True
    except Exception as e:
        info["error"] = str(e)
    return info

def health_gateway_info(settings=GATEWAY_SETTINGS):
    """État de configuration GoPay (aucun secret exposé, aucun appel réseau)."""
    parsed = urlparse(settings.base_url) if settings.base_url else None
    return {
        "configured": settings.configured,
        "hostname": parsed.hostname if parsed else None,
        "entity_activity_id_set": bool(settings.entity_activity_id),
        "timeout": settings.timeout,
        "qr_delay": settings.qr_delay,
    }
