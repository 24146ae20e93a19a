import os

from .responder import CONFIDENCE_THRESHOLD


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# =========================
# Server
# =========================
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
DEBUG = _env_bool("DEBUG")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# =========================
# Webhook handshake + delivery API
# =========================
VERIFY_TOKEN = os.getenv("VERIFY_TOKEN", "")
WHATSAPP_TOKEN = os.getenv("WHATSAPP_TOKEN", "")
PHONE_NUMBER_ID = os.getenv("PHONE_NUMBER_ID", "")
GRAPH_API_URL = os.getenv("GRAPH_API_URL", "https://graph.facebook.com").rstrip("/")
GRAPH_API_VERSION = os.getenv("GRAPH_API_VERSION", "v19.0")
SEND_TIMEOUT = float(os.getenv("SEND_TIMEOUT", "10"))

# =========================
# Matching
# =========================
KB_PATH = os.getenv("KB_PATH") or None
INTENT_THRESHOLD = float(os.getenv("INTENT_THRESHOLD", str(CONFIDENCE_THRESHOLD)))
