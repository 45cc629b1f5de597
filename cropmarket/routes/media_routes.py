# cropmarket/routes/media_routes.py

import os

from flask import Blueprint, abort, current_app, send_from_directory

from cropmarket.services.upload_service import UPLOAD_URL_PREFIX

media_bp = Blueprint("media", __name__, url_prefix=UPLOAD_URL_PREFIX)


@media_bp.get("/<path:filename>")
def uploaded_file(filename):
    """Serve a crop image saved by the upload handler."""
    upload_dir = current_app.config["UPLOAD_DIR"]
    if not os.path.isdir(upload_dir):
        abort(404)
    # send_from_directory refuses paths that escape upload_dir
    return send_from_directory(upload_dir, filename)
