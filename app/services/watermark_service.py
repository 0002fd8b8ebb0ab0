from __future__ import annotations

import math
from dataclasses import dataclass
from io import BytesIO
from typing import Optional

from fastapi.concurrency import run_in_threadpool
from PIL import Image, UnidentifiedImageError

from app.core.config import Settings, get_settings
from app.core.exceptions import CompositeError, DecodeError, EncodeError, WatermarkError
from app.core.logging import configure_logging
from app.models import Anchor, WatermarkOptions
from app.services.fetch_service import RemoteImageFetcher
from app.services.overlay_service import OverlayLayer, OverlaySynthesizer, estimate_anchor_width
from app.utils.data_url import from_inline, mime_type_for, to_inline

logger = configure_logging()

DEFAULT_DIMENSION = 1024


@dataclass
class DecodedImage:
    image: Image.Image
    width: int
    height: int
    format: Optional[str]

    @property
    def has_alpha(self) -> bool:
        return self.image.mode in ("RGBA", "LA", "PA") or "transparency" in self.image.info


@dataclass
class Placement:
    left: int
    top: int


@dataclass
class WatermarkOutcome:
    data: Optional[bytes] = None
    mime_type: Optional[str] = None
    error: Optional[WatermarkError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.data is not None


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_placement(
    width: int,
    height: int,
    text: str,
    anchor: Anchor,
    font_size: float,
    padding: float,
) -> Placement:
    """
    حساب موضع العلامة المائية داخل الصورة.

    الزوايا السفلية تعتمد على حجم الخط (وليس ارتفاع الطبقة)، والزوايا اليمنى
    تعتمد على العرض التقديري للنص. لا يتم حصر النتيجة داخل حدود الصورة، لذا قد
    تقع العلامة جزئيًا أو كليًا خارجها في الصور الصغيرة.
    """
    if anchor in (Anchor.bottom_right, Anchor.top_right):
        left = width - estimate_anchor_width(text, font_size) - padding
    else:
        left = padding

    if anchor in (Anchor.bottom_left, Anchor.bottom_right):
        top = height - font_size - padding
    else:
        top = padding

    return Placement(left=_round_half_up(left), top=_round_half_up(top))


class WatermarkService:
    """تطبيق علامة مائية نصية على الصور مع الرجوع للصورة الأصلية عند الفشل."""

    def __init__(
        self,
        settings: Settings | None = None,
        synthesizer: OverlaySynthesizer | None = None,
        fetcher: RemoteImageFetcher | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.synthesizer = synthesizer or OverlaySynthesizer(self.settings)
        self.fetcher = fetcher or RemoteImageFetcher(self.settings)

    # ------------------------------------------------------------------
    # الواجهات العامة
    # ------------------------------------------------------------------
    def watermark_inline(self, data_url: str, options: WatermarkOptions | None = None) -> str:
        """إرجاع data URL جديدة بالعلامة المائية، أو المدخل نفسه دون تعديل عند الفشل."""
        try:
            source = from_inline(data_url)
        except DecodeError as exc:
            logger.warning("تعذر فك ترميز data URL، إرجاع الصورة الأصلية: %s", exc)
            return data_url

        outcome = self.render(source, options)
        if not outcome.ok:
            logger.warning("فشل تطبيق العلامة المائية، إرجاع الصورة الأصلية: %s", outcome.error)
            return data_url
        return to_inline(outcome.data, outcome.mime_type)

    async def watermark_remote(self, url: str, options: WatermarkOptions | None = None) -> str:
        """جلب الصورة ثم تطبيق العلامة المائية. أخطاء الشبكة لا يتم احتواؤها."""
        remote = await self.fetcher.fetch(url)
        data_url = to_inline(remote.content, remote.content_type)
        return await run_in_threadpool(self.watermark_inline, data_url, options)

    def watermark_bytes(self, source: bytes, options: WatermarkOptions | None = None) -> bytes:
        return self.apply(source, options)

    def apply(self, source: bytes, options: WatermarkOptions | None = None) -> bytes:
        outcome = self.render(source, options)
        if not outcome.ok:
            logger.warning("فشل تطبيق العلامة المائية، إرجاع الصورة الأصلية: %s", outcome.error)
            return source
        return outcome.data

    def render(self, source: bytes, options: WatermarkOptions | None = None) -> WatermarkOutcome:
        """تنفيذ خط المعالجة كاملًا (فك الترميز، الدمج، الترميز) داخل حد أخطاء واحد."""
        options = options or WatermarkOptions()
        try:
            decoded = self.decode(source)
            overlay = self.synthesizer.synthesize(options.text, options.font_size, options.opacity)
            result = self.composite(decoded, overlay, options)
            data = self.encode(result, decoded)
        except WatermarkError as exc:
            return WatermarkOutcome(error=exc)
        except Exception as exc:  # noqa: BLE001 - أي فشل آخر يعني الرجوع للأصل
            return WatermarkOutcome(error=CompositeError(str(exc)))

        return WatermarkOutcome(data=data, mime_type=mime_type_for(decoded.format))

    # ------------------------------------------------------------------
    # مراحل المعالجة
    # ------------------------------------------------------------------
    @staticmethod
    def decode(source: bytes) -> DecodedImage:
        try:
            image = Image.open(BytesIO(source))
            image.load()
        except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as exc:
            raise DecodeError(f"unreadable image: {exc}") from exc

        width, height = image.size
        return DecodedImage(
            image=image,
            width=width or DEFAULT_DIMENSION,
            height=height or DEFAULT_DIMENSION,
            format=image.format,
        )

    @staticmethod
    def composite(decoded: DecodedImage, overlay: OverlayLayer, options: WatermarkOptions) -> Image.Image:
        base = decoded.image.convert("RGBA")
        if overlay.is_empty:
            return base

        placement = compute_placement(
            width=decoded.width,
            height=decoded.height,
            text=options.text,
            anchor=options.anchor,
            font_size=options.font_size,
            padding=options.padding,
        )

        layer = Image.new("RGBA", base.size, (0, 0, 0, 0))
        layer.paste(overlay.image, (placement.left, placement.top))
        return Image.alpha_composite(base, layer)

    def encode(self, image: Image.Image, decoded: DecodedImage) -> bytes:
        buffer = BytesIO()
        try:
            if mime_type_for(decoded.format) == "image/jpeg":
                image.convert("RGB").save(buffer, format="JPEG", quality=self.settings.jpeg_quality)
            else:
                output = image if decoded.has_alpha else image.convert("RGB")
                output.save(buffer, format="PNG")
        except (OSError, ValueError) as exc:
            raise EncodeError(f"failed to encode image: {exc}") from exc
        return buffer.getvalue()
