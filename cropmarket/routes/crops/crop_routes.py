# cropmarket/routes/crops/crop_routes.py

from flask import Blueprint, current_app, jsonify, request

from cropmarket.errors import ApiError, StorageError
from cropmarket.models.user_models import Capability
from cropmarket.routes._helpers import request_data
from cropmarket.security import current_identity, require_capability
from cropmarket.services.crop_service import CropService
from cropmarket.services.upload_service import UploadService

crop_bp = Blueprint("crops", __name__)


# ------------------  ADD CROP (farmer) ------------------
@crop_bp.post("/crops")
@require_capability(Capability.CREATE_CROP)
def add_crop():
    owner = current_identity()

    fields = CropService.parse_fields(request_data())
    image = UploadService.image_from_request(request)

    image_ref = None
    try:
        if image is not None:
            image_ref = UploadService.save_image(image)
        crop = CropService.create_crop(owner, fields, image_ref)
    except StorageError as e:
        UploadService.discard(image_ref)
        current_app.logger.error("Error adding crop: %s", e.message)
        return jsonify(message="Error adding crop", error=e.message), 500
    except OSError as e:
        UploadService.discard(image_ref)
        current_app.logger.error("Error saving crop image: %s", e)
        return jsonify(message="Error adding crop", error="image could not be saved"), 500
    except ApiError:
        # e.g. owner is not a registered farmer
        UploadService.discard(image_ref)
        raise

    return jsonify(message="Crop added successfully", crop=crop.model_dump(mode="json")), 201


# ------------------  LIST CROPS (any role) ------------------
@crop_bp.get("/crops")
@require_capability(Capability.LIST_CROPS)
def list_crops():
    try:
        crops = CropService.list_crops()
    except StorageError as e:
        current_app.logger.error("Error fetching crops: %s", e.message)
        return jsonify(message="Error fetching crops"), 500
    return jsonify(crops), 200
