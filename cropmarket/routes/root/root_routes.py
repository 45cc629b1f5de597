# cropmarket/routes/root/root_routes.py

from flask import Blueprint, jsonify

from cropmarket.errors import StorageError
from cropmarket.store import USERS, get_store

root_bp = Blueprint("root", __name__)


# -----------------------------
# HEALTH
# -----------------------------
@root_bp.get("/health")
def health():
    store = get_store()
    try:
        store.load_all(USERS)
    except StorageError as e:
        return jsonify(ok=False, store=store.describe(), error=e.message), 503
    return jsonify(ok=True, store=store.describe()), 200
