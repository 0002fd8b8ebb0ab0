import base64
import binascii
import re
from typing import Optional

from app.core.exceptions import DecodeError

JPEG_FORMATS = ("JPEG", "MPO")

_DATA_URL_PREFIX = re.compile(r"^data:[^;,]*;base64,", re.IGNORECASE)


def from_inline(data_url: str) -> bytes:
    """
    استخراج البايتات من سلسلة data URL.

    تتم إزالة البادئة ``data:<mime>;base64,`` إن وُجدت بشكل متسامح، ثم فك
    ترميز base64. الحروف الغريبة (مثل المسافات وفواصل الأسطر) يتم تجاهلها.

    Raises:
        DecodeError: إذا كان الجزء المتبقي ليس base64 صالحًا.
    """
    payload = _DATA_URL_PREFIX.sub("", data_url.strip(), count=1)
    try:
        return base64.b64decode(payload)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"invalid base64 payload: {exc}") from exc


def to_inline(data: bytes, mime_type: str) -> str:
    encoded = base64.b64encode(data).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def mime_type_for(image_format: Optional[str]) -> str:
    """JPEG يبقى JPEG، وأي صيغة أخرى تُرمَّز كـ PNG."""
    # Pillow يقرأ صور الكاميرات متعددة الإطارات (FFD8) كـ MPO
    return "image/jpeg" if (image_format or "").upper() in JPEG_FORMATS else "image/png"
