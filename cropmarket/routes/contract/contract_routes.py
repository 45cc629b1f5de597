# cropmarket/routes/contract/contract_routes.py

from io import BytesIO

from flask import Blueprint, current_app, jsonify, send_file

from cropmarket.errors import NotFound
from cropmarket.models.user_models import Capability
from cropmarket.security import current_identity, require_capability
from cropmarket.services.contract_service import ContractService, contract_filename
from cropmarket.services.crop_service import CropService

contract_bp = Blueprint("contract", __name__)


@contract_bp.get("/generate-contract/<crop_id>")
@require_capability(Capability.REQUEST_CONTRACT)
def generate_contract(crop_id: str):
    """
    Download the farming agreement for a crop, filled in for the caller.
    The crop lookup happens before any rendering so a 404 carries no PDF bytes.
    """
    buyer = current_identity()
    try:
        crop = CropService.get_crop(crop_id)
    except NotFound:
        return jsonify(message="Crop not found"), 404

    try:
        pdf_bytes = ContractService.render(crop, buyer)
    except Exception as e:
        current_app.logger.exception("Error generating contract for %s", crop_id)
        return jsonify(message="Error generating contract", error=str(e)), 500

    return send_file(
        BytesIO(pdf_bytes),
        mimetype="application/pdf",
        as_attachment=True,
        download_name=contract_filename(crop.id),
        max_age=0,
    )
