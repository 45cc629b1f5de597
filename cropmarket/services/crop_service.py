# cropmarket/services/crop_service.py
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from flask import current_app
from pydantic import ValidationError as PydanticValidationError

from cropmarket.errors import Forbidden, NotFound, StorageError, ValidationError
from cropmarket.models.crop_models import Crop, CropCreateModel
from cropmarket.models.user_models import Capability, Identity, Role
from cropmarket.services.auth_service import AuthService, first_error
from cropmarket.store import CROPS, get_store

CROP_FIELDS = ("name", "description", "location", "price", "quantity")


class CropService:

    @staticmethod
    def parse_fields(data: Dict[str, Any]) -> CropCreateModel:
        picked = {k: data.get(k) for k in CROP_FIELDS if data.get(k) is not None}
        try:
            return CropCreateModel(**picked)
        except PydanticValidationError as e:
            raise ValidationError(first_error(e))

    @staticmethod
    def ensure_can_create(owner: Identity) -> None:
        if not owner.can(Capability.CREATE_CROP):
            raise Forbidden("Only farmers can upload crops")

        user = AuthService.find_user(owner.username)
        if user is None or user.role != Role.FARMER:
            raise Forbidden("Crop owner must be a registered farmer")

    @staticmethod
    def create_crop(owner: Identity, fields: CropCreateModel, image_ref: Optional[str] = None) -> Crop:
        CropService.ensure_can_create(owner)

        crop = Crop(
            id=str(uuid.uuid4()),
            farmer=owner.username,
            image=image_ref,
            createdAt=datetime.now(timezone.utc).isoformat(),
            **fields.model_dump(),
        )
        get_store().append(CROPS, crop.model_dump(mode="json"))

        current_app.logger.info("Farmer %s listed crop %s (%s)", owner.username, crop.id, crop.name)
        return crop

    @staticmethod
    def list_crops() -> List[Dict[str, Any]]:
        """Every crop, in the order they were stored."""
        return get_store().load_all(CROPS)

    @staticmethod
    def get_crop(crop_id: str) -> Crop:
        for c in get_store().load_all(CROPS):
            if c.get("id") == crop_id:
                try:
                    return Crop(**c)
                except PydanticValidationError as e:
                    current_app.logger.error("Crop %s is malformed: %s", crop_id, e)
                    raise StorageError("Crop record is malformed")
        raise NotFound("Crop not found")
