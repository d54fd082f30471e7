from __future__ import annotations

import logging

from flask import Blueprint, current_app, jsonify, request

from ..storage.wordlists import WordListError, WordListStore
from ..utils.ip import get_client_ip

bp = Blueprint("wordlists", __name__)

logger = logging.getLogger(__name__)


def _store() -> WordListStore:
    return current_app.extensions["wordlists"]


@bp.get("/wordlists")
def list_wordlists():
    return jsonify(_store().names())


@bp.post("/wordlists")
def create_wordlist():
    data = request.get_json(silent=True) or {}
    name = data.get("name")
    if not isinstance(name, str):
        return jsonify({"error": "invalid or exists"}), 400

    try:
        _store().create(name.strip())
    except WordListError as err:
        return jsonify({"error": str(err)}), 400

    logger.info("Word list %s created from %s", name, get_client_ip(request))
    return jsonify({})


@bp.delete("/wordlists/<name>")
def delete_wordlist(name: str):
    _store().delete(name)
    logger.info("Word list %s deleted from %s", name, get_client_ip(request))
    return jsonify({})


@bp.get("/wordlists/<name>")
def get_wordlist(name: str):
    return jsonify(_store().get(name) or [])


@bp.post("/wordlists/<name>/items")
def add_item(name: str):
    data = request.get_json(silent=True) or {}
    item = data.get("item")
    if not isinstance(item, str):
        return jsonify({"error": "invalid"}), 400

    try:
        _store().add_item(name, item.strip())
    except WordListError as err:
        return jsonify({"error": str(err)}), 400

    logger.info("Word list %s: item added from %s", name, get_client_ip(request))
    return jsonify({})


@bp.delete("/wordlists/<name>/items")
def remove_item(name: str):
    item = request.args.get("item", "")
    _store().remove_item(name, item)
    logger.info("Word list %s: item removed from %s", name, get_client_ip(request))
    return jsonify({})
