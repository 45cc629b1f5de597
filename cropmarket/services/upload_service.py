# cropmarket/services/upload_service.py
from __future__ import annotations

import os
import random
import time
from typing import Optional

from flask import current_app
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from cropmarket.errors import ValidationError

IMAGE_FIELD = "image"
UPLOAD_URL_PREFIX = "/uploads"


class UploadService:

    @staticmethod
    def is_multipart(request) -> bool:
        return (request.mimetype or "") == "multipart/form-data"

    @staticmethod
    def image_from_request(request) -> Optional[FileStorage]:
        """
        The single optional image of a crop-creation request.
        Files are only read from multipart bodies, and only under IMAGE_FIELD.
        """
        if not UploadService.is_multipart(request):
            return None

        files = [f for f in request.files.getlist(IMAGE_FIELD) if f and f.filename]
        if len(files) > 1:
            raise ValidationError("Only one image may be uploaded per crop")

        unexpected = [k for k in request.files.keys() if k != IMAGE_FIELD]
        if unexpected:
            raise ValidationError(f"Unexpected file field '{unexpected[0]}'")

        return files[0] if files else None

    @staticmethod
    def stored_name(original: str) -> str:
        filename = secure_filename(original or "")
        ext = os.path.splitext(filename)[1].lower()
        allowed = current_app.config["ALLOWED_IMAGE_EXTENSIONS"]
        if ext not in allowed:
            raise ValidationError(
                f"Unsupported image type; allowed: {', '.join(sorted(allowed))}"
            )
        suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9 - 1):09d}"
        return f"{IMAGE_FIELD}-{suffix}{ext}"

    @staticmethod
    def save_image(file_storage: FileStorage) -> str:
        """Persist the image and return its public reference path."""
        stored = UploadService.stored_name(file_storage.filename)

        upload_dir = current_app.config["UPLOAD_DIR"]
        os.makedirs(upload_dir, exist_ok=True)
        abs_path = os.path.join(upload_dir, stored)
        while os.path.exists(abs_path):
            stored = UploadService.stored_name(file_storage.filename)
            abs_path = os.path.join(upload_dir, stored)

        file_storage.save(abs_path)
        current_app.logger.info("Saved upload %s", stored)
        return f"{UPLOAD_URL_PREFIX}/{stored}"

    @staticmethod
    def discard(reference: Optional[str]) -> None:
        """Remove an upload whose crop could not be stored."""
        if not reference:
            return
        name = os.path.basename(reference)
        path = os.path.join(current_app.config["UPLOAD_DIR"], name)
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
