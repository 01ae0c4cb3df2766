"""
patrol/qr.py

Checkpoint QR payloads and printable PNG labels.
"""

import io
from datetime import datetime

import qrcode

from guardhub.utils.codes import random_base36
from guardhub.utils.dates import epoch_ms

QR_PREFIX = "CHECKPOINT"


def generate_checkpoint_code(moment: datetime | None = None) -> str:
    """e.g. CHECKPOINT-1718000000000-K3Z9QD"""
    return f"{QR_PREFIX}-{epoch_ms(moment)}-{random_base36(6)}"


def render_qr_png(data: str, box_size: int = 10, border: int = 2) -> bytes:
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
