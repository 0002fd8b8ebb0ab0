from .watermark import (
    Anchor,
    EligibilityResponse,
    InlineWatermarkRequest,
    RemoteWatermarkRequest,
    WatermarkOptions,
    WatermarkResponse,
)

__all__ = [
    "Anchor",
    "EligibilityResponse",
    "InlineWatermarkRequest",
    "RemoteWatermarkRequest",
    "WatermarkOptions",
    "WatermarkResponse",
]
