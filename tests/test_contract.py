from datetime import date

import pytest

from cropmarket.models.crop_models import Crop
from cropmarket.models.user_models import Identity, Role
from cropmarket.services.contract_service import (
    LEGAL_REQUIREMENTS,
    TERMS,
    ContractDocument,
    ContractService,
    contract_filename,
)
from conftest import CROP_FIELDS, bearer, token_for


@pytest.fixture
def crop_id(client, farmer_headers):
    resp = client.post("/crops", json={**CROP_FIELDS, "quantity": "10"}, headers=farmer_headers)
    return resp.get_json()["crop"]["id"]


def test_contract_for_missing_crop_is_404_without_pdf(client, buyer_headers):
    resp = client.get("/generate-contract/does-not-exist", headers=buyer_headers)

    assert resp.status_code == 404
    assert resp.mimetype == "application/json"
    assert resp.get_json()["message"] == "Crop not found"
    assert b"%PDF" not in resp.data


def test_contract_download(client, crop_id, buyer_headers):
    resp = client.get(f"/generate-contract/{crop_id}", headers=buyer_headers)

    assert resp.status_code == 200
    assert resp.mimetype == "application/pdf"
    disposition = resp.headers["Content-Disposition"]
    assert disposition.startswith("attachment")
    assert f"contract-{crop_id}.pdf" in disposition

    pdf = resp.data
    assert pdf.startswith(b"%PDF")
    assert b"Buyer: bob" in pdf
    assert b"Farmer: fiona" in pdf
    assert b"Total Price: 25.00 USD" in pdf


def test_contract_requires_token(client, crop_id):
    assert client.get(f"/generate-contract/{crop_id}").status_code == 401


def test_farmer_may_also_request_contract(client, crop_id, farmer_headers):
    resp = client.get(f"/generate-contract/{crop_id}", headers=farmer_headers)
    assert resp.status_code == 200
    assert b"Buyer: fiona" in resp.data


def _render(app, crop, **kwargs):
    with app.app_context():
        return ContractService.render(crop, Identity(username="bob", role=Role.BUYER), **kwargs)


def _crop(**overrides):
    fields = {
        "id": "c-1",
        "name": "Maize",
        "description": "Yellow maize",
        "location": "Indore",
        "price": 1.2,
        "farmer": "fiona",
    }
    fields.update(overrides)
    return Crop(**fields)


def test_contract_sections_in_order(app):
    pdf = _render(app, _crop(quantity=100), today=date(2026, 3, 4))

    markers = [
        b"Contract Farming Agreement",
        b"Date: 04 Mar 2026",
        b"PARTIES INVOLVED",
        b"CROP DETAILS",
        b"Crop Name: Maize",
        b"Total Price: 120.00 USD",
        b"TERMS AND CONDITIONS",
        b"LEGAL REQUIREMENTS",
        b"SIGNATURES",
        b"Farmer Signature:",
        b"Buyer Signature:",
        b"does not require a physical seal",
    ]
    positions = [pdf.find(m) for m in markers]
    assert -1 not in positions
    assert positions == sorted(positions)


def test_fixed_clauses_are_present(app):
    pdf = _render(app, _crop())
    assert len(TERMS) == 4 and len(LEGAL_REQUIREMENTS) == 4
    assert b"3. Payment will be made upon delivery" in pdf
    assert b"4. The buyer must ensure timely payment" in pdf


def test_contract_without_quantity_does_not_crash(app):
    pdf = _render(app, _crop())
    assert b"Total Quantity: Not specified" in pdf
    assert b"Total Price: Not specified" in pdf


def test_contract_prints_usernames_with_punctuation(client):
    farmer = bearer(token_for(client, "anna.k-2", "farmer"))
    buyer = bearer(token_for(client, "li_wei@market", "buyer"))
    crop_id = client.post("/crops", json=CROP_FIELDS, headers=farmer).get_json()["crop"]["id"]

    resp = client.get(f"/generate-contract/{crop_id}", headers=buyer)

    assert resp.status_code == 200
    assert b"Buyer: li_wei@market" in resp.data
    assert b"Farmer: anna.k-2" in resp.data


def test_non_latin_crop_text_is_substituted_not_dropped(app):
    pdf = _render(app, _crop(description="Basmati कृषि rice"))
    assert b"Description: Basmati ???? rice" in pdf


def test_long_name_and_location_wrap(app):
    pdf = _render(app, _crop(name="Organic " * 15, location="Village road " * 15))
    assert pdf.startswith(b"%PDF")
    assert b"Crop Name: Organic" in pdf
    assert b"Location: Village road" in pdf


def test_compressed_contract_is_still_a_pdf(app):
    app.config["CONTRACT_COMPRESS"] = True
    pdf = _render(app, _crop())
    assert pdf.startswith(b"%PDF")
    assert b"Buyer: bob" not in pdf


def test_contract_filename():
    assert contract_filename("abc") == "contract-abc.pdf"


def test_rendering_failure_is_500_json(client, crop_id, buyer_headers, monkeypatch):
    def broken_add_page(self, *args, **kwargs):
        raise RuntimeError("font cache corrupted")

    monkeypatch.setattr(ContractDocument, "add_page", broken_add_page)

    resp = client.get(f"/generate-contract/{crop_id}", headers=buyer_headers)

    assert resp.status_code == 500
    assert resp.mimetype == "application/json"
    assert resp.get_json()["message"] == "Error generating contract"
    assert b"%PDF" not in resp.data
