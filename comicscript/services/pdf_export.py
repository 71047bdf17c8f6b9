import logging
from typing import Sequence

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from comicscript.config import settings
from comicscript.services.formatter import ScriptBlock, ScriptLine, LineKind, LineStyle

logger = logging.getLogger(__name__)

# (family, style, size) per line style, core fonts only
FONTS = {
    LineStyle.HEADING: ("Helvetica", "B", 16),
    LineStyle.BODY: ("Helvetica", "", 11),
    LineStyle.ITALIC: ("Helvetica", "I", 11),
    LineStyle.ITALIC_SERIF: ("Times", "I", 12),
    LineStyle.BOLD_MONO: ("Courier", "B", 11),
}
LABEL_FONT = ("Helvetica", "B", 11)
TITLE_SIZE = 24


def _latin1(text: str) -> str:
    # Core PDF fonts only cover latin-1
    return text.encode("latin-1", "replace").decode("latin-1")


class ScriptPdfExporter:
    """
    Paginates script blocks onto fixed-size pages:
      - the title block and every script page start on a new sheet
      - long script pages flow onto continuation sheets
    """

    def __init__(self, page_format: str = None, margin_pt: float = None, char_width_pt: float = 6.0):
        self.page_format = page_format or settings.pdf_page_format
        self.margin = settings.pdf_margin_pt if margin_pt is None else margin_pt
        # One indentation step in points
        self.char_width = char_width_pt

    def export(self, blocks: Sequence[ScriptBlock], title: str = "", author: str = "") -> bytes:
        pdf = FPDF(orientation="P", unit="pt", format=self.page_format)
        pdf.set_margins(self.margin, self.margin, self.margin)
        pdf.set_auto_page_break(auto=True, margin=self.margin)
        pdf.set_title(_latin1(title or "Script"))
        pdf.set_author(_latin1(author or ""))

        for block in blocks:
            pdf.add_page()
            for line in block.lines:
                self._write_line(pdf, line, is_title=block.kind == "title")

        logger.debug(f"Rendered {len(blocks)} block(s) onto {pdf.page_no()} PDF page(s)")
        return bytes(pdf.output())

    def _write_line(self, pdf: FPDF, line: ScriptLine, is_title: bool = False):
        family, style, size = FONTS[line.style]
        if is_title and line.kind == LineKind.TITLE:
            size = TITLE_SIZE

        left = pdf.l_margin + line.indent * self.char_width
        line_height = size * 1.35

        if line.kind == LineKind.PANEL_HEADER:
            pdf.ln(size * 0.5)

        if line.label:
            prefix = f"{line.number}. " if line.number is not None else ""
            pdf.set_x(left)
            pdf.set_font(*LABEL_FONT)
            pdf.multi_cell(0, line_height, _latin1(prefix + line.label),
                           new_x=XPos.LMARGIN, new_y=YPos.NEXT)
            left += 2 * self.char_width

        pdf.set_x(left)
        pdf.set_font(family, style, size)
        align = "C" if is_title else "L"
        pdf.multi_cell(0, line_height, _latin1(line.text), align=align,
                       new_x=XPos.LMARGIN, new_y=YPos.NEXT)

        if line.kind in (LineKind.PAGE_HEADER, LineKind.SYNOPSIS):
            pdf.ln(size * 0.5)
