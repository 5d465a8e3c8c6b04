from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Optional

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from .logging import get_logger
from .models import LabelRecord

log = get_logger(__name__)

LABEL_SIZE_MM = (58, 60)
CODE39_CHARS = set("0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ-. $/+%")


def format_date(value: date) -> str:
    return value.strftime("%d.%m.%Y")


def format_time(value: datetime) -> str:
    return value.strftime("%H:%M")


def _barcode_text(label_id: str) -> str:
    body = "".join(ch for ch in label_id.upper() if ch in CODE39_CHARS)[:10]
    return f"*{body or '0'}*"


class _LabelPdf:
    """Small wrapper picking a Unicode font when one is installed."""

    def __init__(self, font_path: Optional[str]):
        self.pdf = FPDF(orientation="P", unit="mm", format=LABEL_SIZE_MM)
        self.pdf.set_auto_page_break(False)
        self.pdf.set_margins(3, 3, 3)
        self.pdf.add_page()
        self.unicode = bool(font_path) and Path(font_path).is_file()
        if self.unicode:
            self.pdf.add_font("LabelFont", fname=str(font_path))
        else:
            log.debug("label font %s not found, falling back to Helvetica", font_path)

    def font(self, size: float, bold: bool = False) -> None:
        if self.unicode:
            self.pdf.set_font("LabelFont", "", size)
        else:
            self.pdf.set_font("Helvetica", "B" if bold else "", size)

    def text(self, value: str) -> str:
        if self.unicode:
            return value
        return value.encode("latin-1", "replace").decode("latin-1")

    def line(self, height: float, value: str, align: str = "C") -> None:
        self.pdf.cell(0, height, self.text(value), align=align, new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    def row(self, height: float, left: str, right: str) -> None:
        half = (self.pdf.w - self.pdf.l_margin - self.pdf.r_margin) / 2
        self.pdf.cell(half, height, self.text(left), align="L")
        self.pdf.cell(half, height, self.text(right), align="R", new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    def rule(self) -> None:
        y = self.pdf.get_y() + 0.5
        self.pdf.line(self.pdf.l_margin, y, self.pdf.w - self.pdf.r_margin, y)
        self.pdf.set_y(y + 1)


def label_pdf_bytes(record: LabelRecord, font_path: Optional[str] = None) -> bytes:
    """Render one thermal label for ``record`` as a PDF page."""
    doc = _LabelPdf(font_path)
    pdf = doc.pdf

    doc.font(11, bold=True)
    pdf.multi_cell(
        0, 5, doc.text(record.product_name.upper()), align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT
    )
    doc.rule()
    doc.font(8)
    doc.line(4, record.category)
    doc.row(4, "Изготовлено:", format_date(record.production_date))
    doc.row(4, "Напечатано:", f"{format_date(record.printed_at.date())} {format_time(record.printed_at)}")
    doc.font(10, bold=True)
    doc.row(5, "Годен до:", format_date(record.expiry_date))
    doc.rule()
    doc.font(7)
    doc.line(4, f"Хранить при {record.temperature_range}")
    doc.rule()

    code = _barcode_text(record.id)
    bar_width = 0.25
    # code 39: 16 narrow-bar units per character including the gap
    code_width = len(code) * 16 * bar_width
    x = max(pdf.l_margin, (pdf.w - code_width) / 2)
    pdf.code39(code, x, pdf.get_y(), bar_width, 8)
    pdf.set_y(pdf.get_y() + 9)
    doc.font(6)
    doc.line(3, record.id)

    out = pdf.output()
    if isinstance(out, (bytes, bytearray)):
        return bytes(out)
    return str(out).encode("latin1")
