from __future__ import annotations

import logging
import tempfile
from pathlib import Path

from flask import Flask, current_app, jsonify, request
from werkzeug.utils import secure_filename

from ..container import Container
from ..core.exceptions import (
    DomainError,
    ExternalServiceError,
    ScheduleNotFoundError,
    StudentNotFoundError,
    ValidationError,
)
from . import messages

logger = logging.getLogger(__name__)

_ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/webp", "image/gif"}
_PDF_TYPE = "application/pdf"


def _error_response(e: Exception):
    if isinstance(e, ValidationError):
        return jsonify({"error": str(e)}), 400
    if isinstance(e, (StudentNotFoundError, ScheduleNotFoundError)):
        return jsonify({"error": str(e)}), 404
    if isinstance(e, ExternalServiceError):
        return jsonify({"error": str(e)}), 502
    if isinstance(e, DomainError):
        return jsonify({"error": str(e)}), 400
    logger.exception("Unhandled error")
    return jsonify({"error": "Internal server error"}), 500


def _iter_cloud_api_texts(payload: dict):
    """Yield (sender, text) for text messages in a WhatsApp Cloud API webhook payload."""
    for entry in payload.get("entry") or []:
        for change in entry.get("changes") or []:
            for msg in (change.get("value") or {}).get("messages") or []:
                if msg.get("type") == "text":
                    yield msg.get("from"), (msg.get("text") or {}).get("body", "")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/messages", methods=["POST"], endpoint="api_messages")
    def api_messages():
        data = request.get_json(silent=True) or {}
        sender = str(data.get("from") or "").strip()
        text = str(data.get("text") or "")
        if not sender:
            return jsonify({"error": "'from' is required"}), 400

        try:
            reply = container.conversation_service.handle_text(sender, text)
        except Exception as e:
            return _error_response(e)
        return jsonify({"reply": reply})

    @app.route("/api/messages/media", methods=["POST"], endpoint="api_messages_media")
    def api_messages_media():
        sender = (request.form.get("from") or "").strip()
        upload = request.files.get("file")
        if not sender or upload is None:
            return jsonify({"error": "'from' and 'file' are required"}), 400
        mimetype = (upload.mimetype or "").lower()
        if mimetype not in _ALLOWED_IMAGE_TYPES and mimetype != _PDF_TYPE:
            return jsonify({"reply": messages.UNSUPPORTED_MEDIA}), 415

        try:
            # The temporary directory (and the upload in it) is removed on every exit path.
            with tempfile.TemporaryDirectory(prefix="schedule-") as tmp:
                path = Path(tmp) / (secure_filename(upload.filename or "") or "schedule.img")
                upload.save(path)
                if mimetype == _PDF_TYPE:
                    reply = container.conversation_service.handle_document(sender, path)
                else:
                    reply = container.conversation_service.handle_image(sender, [path])
        except Exception as e:
            return _error_response(e)
        return jsonify({"reply": reply})

    @app.route("/api/students/<phone>/summary", methods=["GET"], endpoint="api_student_summary")
    def api_student_summary(phone: str):
        try:
            return jsonify(container.conversation_service.summary_for(phone))
        except Exception as e:
            return _error_response(e)

    @app.route("/webhook", methods=["GET"], endpoint="webhook_verify")
    def webhook_verify():
        mode = request.args.get("hub.mode")
        token = request.args.get("hub.verify_token")
        challenge = request.args.get("hub.challenge", "")
        expected = current_app.config.get("WHATSAPP_VERIFY_TOKEN")
        if mode == "subscribe" and expected and token == expected:
            logger.info("Webhook verified")
            return challenge, 200
        return "Forbidden", 403

    @app.route("/webhook", methods=["POST"], endpoint="webhook_receive")
    def webhook_receive():
        payload = request.get_json(silent=True) or {}
        replies = []
        for sender, text in _iter_cloud_api_texts(payload):
            if not sender:
                continue
            try:
                replies.append({"to": sender, "text": container.conversation_service.handle_text(sender, text)})
            except Exception:
                logger.exception("Failed to handle webhook message from %s", sender)
                replies.append({"to": sender, "text": messages.AI_UNAVAILABLE})
        return jsonify({"status": "EVENT_RECEIVED", "replies": replies}), 200
