from __future__ import annotations

import base64
import io
import time
from typing import Callable, Optional

import qrcode
from qrcode.constants import ERROR_CORRECT_M

from ..core.constants import QR_PREFIX


def make_qr_payload(candidate_id: int, *, now_ms: Optional[Callable[[], int]] = None) -> str:
    """``HACKATHON_<id>_<epoch ms>``: unique per candidate and issue time."""
    millis = now_ms() if now_ms else int(time.time() * 1000)
    return f"{QR_PREFIX}_{int(candidate_id)}_{millis}"


def render_png(payload: str, *, box_size: int = 10, border: int = 2) -> bytes:
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_M, box_size=box_size, border=border)
    qr.add_data(payload)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def render_data_url(payload: str) -> str:
    encoded = base64.b64encode(render_png(payload)).decode("ascii")
    return f"data:image/png;base64,{encoded}"
