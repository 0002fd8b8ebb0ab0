from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from app.core.config import Settings, get_settings
from app.core.logging import configure_logging

logger = configure_logging()

# عرض اللوحة يُقدَّر بـ 0.7 من حجم الخط لكل حرف، بينما يُحسب إزاحة الزوايا اليمنى
# بـ 0.6. القيمتان مختلفتان في السلوك المنشور، لذلك تبقى كل منهما ثابتًا مستقلًا.
LAYOUT_WIDTH_FACTOR = 0.7
ANCHOR_WIDTH_FACTOR = 0.6
HEIGHT_FACTOR = 1.3

FILL_RGB = (255, 255, 255)
STROKE_RGB = (0, 0, 0)
STROKE_OPACITY = 0.3
STROKE_WIDTH = 1

DEFAULT_FONT_NAME = "DejaVuSans-Bold.ttf"
# left-baseline: النص يبدأ من x=0 وخط الأساس عند y=font_size داخل الطبقة
BASELINE_ANCHOR = "ls"


@dataclass
class OverlayLayer:
    width: int
    height: int
    image: Image.Image

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0


def estimate_layer_size(text: str, font_size: float) -> tuple[int, int]:
    """الأبعاد التقريبية للوحة النص (ليست قياسات دقيقة للحروف)."""
    width = math.ceil(len(text) * font_size * LAYOUT_WIDTH_FACTOR)
    height = math.ceil(font_size * HEIGHT_FACTOR)
    return width, height


def estimate_anchor_width(text: str, font_size: float) -> float:
    return len(text) * font_size * ANCHOR_WIDTH_FACTOR


def _alpha(opacity: float) -> int:
    return int(round(255 * min(1.0, max(0.0, opacity))))


class OverlaySynthesizer:
    """بناء طبقة نص شبه شفافة (أبيض مع حد داكن) لاستخدامها كعلامة مائية."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    def synthesize(self, text: str, font_size: float, opacity: float) -> OverlayLayer:
        width, height = estimate_layer_size(text, font_size)
        image = Image.new("RGBA", (width, height), (0, 0, 0, 0))

        if text and width and height:
            font = self._load_font(font_size)
            xy, anchor = self._text_origin(font, font_size)
            draw = ImageDraw.Draw(image)
            draw.text(
                xy,
                text,
                font=font,
                anchor=anchor,
                fill=(*FILL_RGB, _alpha(opacity)),
                stroke_width=STROKE_WIDTH,
                stroke_fill=(*STROKE_RGB, _alpha(STROKE_OPACITY)),
            )

        return OverlayLayer(width=width, height=height, image=image)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _font_candidates(self) -> List[str]:
        candidates: List[str] = []
        if self.settings.font_path:
            candidates.append(str(Path(self.settings.font_path)))
        candidates.append(DEFAULT_FONT_NAME)
        return candidates

    @staticmethod
    def _text_origin(
        font: ImageFont.FreeTypeFont | ImageFont.ImageFont, font_size: float
    ) -> Tuple[Tuple[float, float], Optional[str]]:
        """خط الأساس عند y = حجم الخط. الخطوط النقطية لا تدعم المراسي فتُرسم من الأعلى."""
        if isinstance(font, ImageFont.FreeTypeFont):
            return (0, font_size), BASELINE_ANCHOR
        return (0, 0), None

    def _load_font(self, font_size: float) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
        for candidate in self._font_candidates():
            try:
                return ImageFont.truetype(candidate, size=font_size)
            except OSError:
                logger.debug("تعذر تحميل الخط %s، تجربة الخط التالي", candidate)
        return ImageFont.load_default(size=font_size)
