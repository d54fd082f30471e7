from __future__ import annotations

from flask import Blueprint, jsonify

from ..game import service

bp = Blueprint("rooms", __name__)


@bp.get("/rooms/<room_id>")
def get_room(room_id: str):
    room = service.get_room(room_id)
    if not room:
        return jsonify({"error": "room_not_found"}), 404
    return jsonify(service.room_public_state(room))
