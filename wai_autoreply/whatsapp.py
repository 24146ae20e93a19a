import logging
from typing import Any, List, NamedTuple

import requests

from . import config

logger = logging.getLogger(__name__)


class InboundMessage(NamedTuple):
    sender: str
    text: str


# =========================
# Inbound (Cloud API webhook payload)
# =========================
def _items(obj: Any, key: str) -> List[Any]:
    value = obj.get(key) if isinstance(obj, dict) else None
    return value if isinstance(value, list) else []


def extract_text_messages(payload: Any) -> List[InboundMessage]:
    """
    Pulls (sender, text) pairs out of a webhook notification:
    entry[].changes[].value.messages[] where type == "text".
    Anything that doesn't look like that is skipped.
    """
    out: List[InboundMessage] = []
    for entry in _items(payload, "entry"):
        for change in _items(entry, "changes"):
            value = change.get("value") if isinstance(change, dict) else None
            for msg in _items(value, "messages"):
                if not isinstance(msg, dict) or msg.get("type") != "text":
                    continue
                text = msg.get("text")
                body = text.get("body") if isinstance(text, dict) else None
                sender = msg.get("from")
                if not isinstance(sender, str) or not sender:
                    continue
                out.append(InboundMessage(sender, body if isinstance(body, str) else ""))
    return out


# =========================
# Outbound
# =========================
def messages_url() -> str:
    return f"{config.GRAPH_API_URL}/{config.GRAPH_API_VERSION}/{config.PHONE_NUMBER_ID}/messages"


def send_text(to: str, body: str, session=None) -> bool:
    if not config.WHATSAPP_TOKEN or not config.PHONE_NUMBER_ID:
        logger.warning("WhatsApp credentials not configured; reply to %s not sent", to)
        return False

    payload = {
        "messaging_product": "whatsapp",
        "to": to,
        "type": "text",
        "text": {"body": body},
    }
    headers = {"Authorization": f"Bearer {config.WHATSAPP_TOKEN}"}

    try:
        res = (session or requests).post(
            messages_url(), json=payload, headers=headers, timeout=config.SEND_TIMEOUT
        )
    except requests.RequestException as e:
        logger.error("Delivery to %s failed: %s", to, e)
        return False

    if not res.ok:
        logger.error("Delivery to %s rejected (%s): %s", to, res.status_code, res.text[:300])
        return False
    return True
