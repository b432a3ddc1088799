"""Printable squad roster (one section per squad, members with photos)."""
from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Callable, Optional, Sequence
from xml.sax.saxutils import escape

from PIL import Image as PILImage
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer

from ..candidates.model import Candidate
from ..squads.model import Squad

logger = logging.getLogger(__name__)

PDF_MIMETYPE = "application/pdf"
PHOTO_SIZE = 80
_PRINTABLE_FORMATS = {"JPEG", "PNG"}


def _photo_flowable(path: Path, styles) -> object:
    # Pillow reports some corrupt PNG chunks as SyntaxError rather than OSError.
    try:
        with PILImage.open(path) as img:
            fmt = img.format
            img.verify()
    except (OSError, SyntaxError):
        logger.warning("Could not read photo %s", path, exc_info=True)
        return Paragraph("Image could not be rendered.", styles["Italic"])
    if fmt not in _PRINTABLE_FORMATS:
        return Paragraph("Unsupported image format.", styles["Italic"])
    return Image(str(path), width=PHOTO_SIZE, height=PHOTO_SIZE, hAlign="LEFT")


def render_squads_pdf(
    *,
    title: str,
    squads: Sequence[Squad],
    photo_for: Callable[[Candidate], Optional[Path]],
) -> bytes:
    """A4 document listing every squad with member names, skills and photos."""
    styles = getSampleStyleSheet()
    out = io.BytesIO()
    doc = SimpleDocTemplate(
        out, pagesize=A4, leftMargin=50, rightMargin=50, topMargin=50, bottomMargin=50, title=title
    )

    story: list = [Paragraph(escape(title), styles["Title"])]
    for squad in squads:
        story.append(Paragraph(f"Squad: {escape(squad.name)}", styles["Heading2"]))
        if not squad.members:
            story.append(Paragraph("No members yet.", styles["Italic"]))
        for member in squad.members:
            story.append(Paragraph(f"Name: {escape(member.name)}", styles["Normal"]))
            story.append(Paragraph(f"Skills: {escape(member.skills or 'N/A')}", styles["Normal"]))
            photo = photo_for(member)
            if photo is not None:
                story.append(_photo_flowable(photo, styles))
            story.append(Spacer(1, 8))
        story.append(Spacer(1, 16))

    doc.build(story)
    return out.getvalue()
