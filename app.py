import logging

from flask import Flask, request, jsonify
from flask_cors import CORS

from wai_autoreply import config, whatsapp
from wai_autoreply.knowledge import KNOWLEDGE_BASE, get_intents
from wai_autoreply.responder import respond

logging.basicConfig(level=getattr(logging, config.LOG_LEVEL, logging.INFO))
logger = logging.getLogger("wai_autoreply.app")

# =========================
# Knowledge base (loaded once, read-only)
# =========================
INTENTS = get_intents(config.KB_PATH)
KB_SOURCE = "builtin" if INTENTS is KNOWLEDGE_BASE else config.KB_PATH


def decide(text: str):
    return respond(text, intents=INTENTS, threshold=config.INTENT_THRESHOLD)


# =========================
# Flask app
# =========================
app = Flask(__name__)
CORS(app)


# ---- Home (uptime check) ----
@app.get("/")
def home():
    return "Wai Business Pro Fuzzy Auto-Reply is Running! ✅"


@app.get("/health")
def health():
    return jsonify({"ok": True, "intents": len(INTENTS), "kb_source": KB_SOURCE})


# ---- API: POST /wa  { text: "...", from?: "9198..." } ----
@app.post("/wa")
def wa():
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        data = {}
    text = data.get("text") or ""
    sender = data.get("from") or "user"

    result = decide(text)
    logger.info("reply to=%s tag=%s score=%s", sender, result.tag, result.intent_score)

    body = result.to_dict()
    body["to"] = sender
    return jsonify(body)


# ---- Webhook registration handshake ----
@app.get("/webhook")
def webhook_verify():
    mode = request.args.get("hub.mode")
    token = request.args.get("hub.verify_token")
    challenge = request.args.get("hub.challenge", "")

    if mode == "subscribe" and config.VERIFY_TOKEN and token == config.VERIFY_TOKEN:
        logger.info("Webhook verified")
        return challenge, 200, {"Content-Type": "text/plain; charset=utf-8"}

    logger.warning("Webhook verification failed (mode=%s)", mode)
    return "Forbidden", 403


# ---- Inbound messages from the platform ----
@app.post("/webhook")
def webhook_receive():
    payload = request.get_json(silent=True)
    try:
        messages = whatsapp.extract_text_messages(payload)
    except Exception:
        logger.exception("Malformed webhook notification")
        messages = []
    if not messages:
        logger.info("Webhook notification without text messages ignored")

    handled = 0
    for msg in messages:
        try:
            result = decide(msg.text)
            logger.info("reply to=%s tag=%s score=%s", msg.sender, result.tag, result.intent_score)
            if whatsapp.send_text(msg.sender, result.reply):
                handled += 1
        except Exception:
            # never let one bad message fail the whole notification
            logger.exception("Failed to handle message from %s", msg.sender)

    # always 200 so the platform doesn't retry
    return jsonify({"ok": True, "handled": handled})


if __name__ == "__main__":
    # Run: python app.py
    logger.info("Server started on %s", config.PORT)
    app.run(host=config.HOST, port=config.PORT, debug=config.DEBUG)
