"""Flask front door: the chat transport POSTs events here and relays the text."""

from __future__ import annotations

from typing import Any, Dict, Optional

from flask import Flask, jsonify, request

from .dispatcher import GuessDispatcher, InboundEvent
from .log import LogFn
from .messages import MessageCatalog


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError("boolean is not an id")
    return int(value)


def _event_from_payload(payload: Dict[str, Any]) -> InboundEvent:
    if "chat_id" not in payload:
        raise ValueError("'chat_id' is required")
    text = payload.get("text")
    if text is not None and not isinstance(text, (str, int)):
        raise ValueError("'text' must be a string or a number")
    return InboundEvent(
        chat_id=int(payload["chat_id"]),
        user_id=_optional_int(payload.get("user_id")),
        text="" if text is None else str(text),
        first_name=str(payload.get("first_name") or ""),
        language_code=payload.get("language_code") or None,
    )


def create_app(
    dispatcher: GuessDispatcher,
    catalog: MessageCatalog,
    *,
    clean_log: Optional[LogFn] = None,
) -> Flask:
    app = Flask(__name__)
    log = clean_log or (lambda *args, **kwargs: None)

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"ok": True})

    @app.route("/api/config", methods=["GET"])
    def public_config():
        return jsonify(dispatcher.config.public_view())

    @app.route("/api/event", methods=["POST"])
    def handle_event():
        try:
            payload = request.get_json(force=True, silent=False) or {}
        except Exception as exc:
            return jsonify({"error": f"Invalid JSON payload: {exc}"}), 400
        if not isinstance(payload, dict):
            return jsonify({"error": "Payload must be a JSON object"}), 400
        try:
            event = _event_from_payload(payload)
        except (TypeError, ValueError) as exc:
            return jsonify({"error": str(exc)}), 400

        # language is resolved before the event so "/lang xx" replies in the old language
        lang = dispatcher.language_for(event)
        try:
            outcome = dispatcher.handle_event(event)
        except Exception as exc:
            log(f"Event handling failed for chat={event.chat_id}: {exc}", "❌", show_always=True)
            return jsonify({"error": "internal error"}), 500
        reply = catalog.render(outcome, lang, chat_id=event.chat_id)
        return jsonify(
            {
                "outcome": outcome.kind,
                "data": outcome.to_dict(),
                "text": reply.text if reply else None,
                "lang": reply.lang if reply else lang,
            }
        )

    return app


__all__ = ["create_app"]
