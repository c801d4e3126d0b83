"""Render token payloads as QR images and read them back from uploads."""

from __future__ import annotations

import io
from typing import BinaryIO, Optional

import qrcode
from PIL import Image, UnidentifiedImageError
from pyzbar.pyzbar import decode as pyzbar_decode


def render_png(payload: str, *, box_size: int = 10, border: int = 2) -> io.BytesIO:
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=box_size,
        border=border,
    )
    qr.add_data(payload)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return buf


def read_payload(stream: BinaryIO) -> Optional[bytes]:
    """Return the raw bytes of the first QR code found in an image.

    None when the upload is not a readable image or holds no QR code. The
    bytes are left undecoded; TokenCodec.decode rejects anything that is not
    UTF-8 JSON.
    """
    try:
        img = Image.open(stream).convert("RGB")
    except (UnidentifiedImageError, OSError):
        return None

    decoded = pyzbar_decode(img)
    if not decoded:
        return None
    return decoded[0].data.strip()
