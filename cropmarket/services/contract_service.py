# cropmarket/services/contract_service.py
from __future__ import annotations

from datetime import date
from typing import Optional

from flask import current_app
from fpdf import FPDF
from fpdf.enums import XPos, YPos

from cropmarket.models.crop_models import Crop
from cropmarket.models.user_models import Identity

TITLE = "Contract Farming Agreement"

PURPOSE = (
    "This agreement is entered into by the aforementioned parties for the purpose of "
    "purchasing agricultural produce as described below."
)

TERMS = (
    "1. The buyer agrees to purchase the crop as per the details mentioned above.",
    "2. The farmer guarantees that the crop will meet the agreed-upon quality standards "
    "and will be delivered at the specified location.",
    "3. Payment will be made upon delivery and verification of the crop.",
    "4. Any disputes arising from this agreement shall be resolved as per the applicable "
    "agricultural laws of the region.",
)

LEGAL_PREAMBLE = (
    "This agreement complies with the legal framework established for contract farming "
    "under the applicable agricultural and trade laws. Both parties are advised to read "
    "and understand the terms before signing."
)

LEGAL_REQUIREMENTS = (
    "1. The buyer and farmer must adhere to all government regulations regarding the sale "
    "and purchase of agricultural produce.",
    "2. This document is a legally binding contract, and any violation of its terms may "
    "result in legal action.",
    "3. The farmer must ensure that the crop is free from pests, diseases, and harmful substances.",
    "4. The buyer must ensure timely payment as per the agreed terms.",
)

FOOTER = "This agreement is generated electronically and does not require a physical seal."

SIGNATURE_LINE = "__________________________"
NOT_SPECIFIED = "Not specified"

LINE_H = 7


def _latin1(text) -> str:
    # core PDF fonts only cover Latin-1
    return str(text).encode("latin-1", "replace").decode("latin-1")


def _money(value: float) -> str:
    return f"{value:,.2f}"


def contract_filename(crop_id: str) -> str:
    return f"contract-{crop_id}.pdf"


class ContractDocument(FPDF):
    """FPDF with the handful of text primitives the agreement layout uses."""

    def line_text(self, text, size=12, style="", align="L"):
        self.set_font("Helvetica", style=style, size=size)
        self.cell(0, LINE_H, _latin1(text), align=align, new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    def paragraph(self, text, size=12, align="L"):
        self.set_font("Helvetica", size=size)
        self.multi_cell(0, LINE_H, _latin1(text), align=align, new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    def heading(self, text):
        self.line_text(text, size=14, style="U")
        self.ln(LINE_H / 2)

    def signature(self, label):
        self.set_font("Helvetica", size=12)
        self.cell(60, LINE_H, label)
        self.cell(0, LINE_H, SIGNATURE_LINE, align="R", new_x=XPos.LMARGIN, new_y=YPos.NEXT)


class ContractService:

    @staticmethod
    def render(crop: Crop, buyer: Identity, today: Optional[date] = None) -> bytes:
        """
        Lay out the agreement for ``crop`` and the requesting ``buyer``.
        Returns the finished PDF; nothing is sent before rendering completes.
        """
        today = today or date.today()

        pdf = ContractDocument(format="A4")
        pdf.set_compression(current_app.config.get("CONTRACT_COMPRESS", True))
        pdf.set_title(_latin1(f"{TITLE} - {crop.id}"))
        pdf.set_creator("cropmarket")
        pdf.set_auto_page_break(auto=True, margin=15)
        pdf.add_page()

        # Title
        pdf.line_text(TITLE, size=18, style="U", align="C")
        pdf.ln(LINE_H * 2)

        # Date
        pdf.line_text(f"Date: {today.strftime('%d %b %Y')}", align="R")
        pdf.ln(LINE_H)

        # Parties
        pdf.heading("PARTIES INVOLVED")
        pdf.line_text(f"Buyer: {buyer.username}")
        pdf.line_text(f"Farmer: {crop.farmer}")
        pdf.paragraph(PURPOSE)
        pdf.ln(LINE_H)

        # Crop details
        total = crop.total_price()
        pdf.heading("CROP DETAILS")
        pdf.paragraph(f"Crop Name: {crop.name}")
        pdf.paragraph(f"Description: {crop.description}")
        pdf.paragraph(f"Location: {crop.location}")
        pdf.line_text(f"Price: {_money(crop.price)} USD per kg")
        if crop.quantity is None:
            pdf.line_text(f"Total Quantity: {NOT_SPECIFIED}")
            pdf.line_text(f"Total Price: {NOT_SPECIFIED}")
        else:
            pdf.line_text(f"Total Quantity: {_money(crop.quantity)} kg")
            pdf.line_text(f"Total Price: {_money(total)} USD")
        pdf.ln(LINE_H)

        # Terms and conditions
        pdf.heading("TERMS AND CONDITIONS")
        for clause in TERMS:
            pdf.paragraph(clause)
        pdf.ln(LINE_H / 2)

        # Legal requirements
        pdf.heading("LEGAL REQUIREMENTS")
        pdf.paragraph(LEGAL_PREAMBLE)
        for clause in LEGAL_REQUIREMENTS:
            pdf.paragraph(clause)
        pdf.ln(LINE_H / 2)

        # Signatures
        pdf.heading("SIGNATURES")
        pdf.signature("Farmer Signature:")
        pdf.ln(LINE_H * 2)
        pdf.signature("Buyer Signature:")
        pdf.ln(LINE_H * 2)

        # Footer
        pdf.line_text(FOOTER, size=10, align="C")

        data = bytes(pdf.output())
        current_app.logger.info(
            "Contract for crop %s rendered for buyer %s (%d bytes)", crop.id, buyer.username, len(data)
        )
        return data
