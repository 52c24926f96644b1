# Overview: Flask API route exposing the current transient notification.

from flask import Blueprint, jsonify

from ..ledger import get_ledger


notifications_bp = Blueprint("notifications", __name__, url_prefix="/api/notifications")


@notifications_bp.get("")
def current_notification_route():
    notification = get_ledger().notifier.current()
    return jsonify({"notification": notification.to_dict() if notification else None})


@notifications_bp.delete("")
def dismiss_notification_route():
    get_ledger().notifier.clear()
    return jsonify({"ok": True})
