from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


MIN_FONT_SIZE = 1.0


class Anchor(str, Enum):
    bottom_left = "bottom-left"
    bottom_right = "bottom-right"
    top_left = "top-left"
    top_right = "top-right"


class WatermarkOptions(BaseModel):
    """خيارات العلامة المائية. أي حقل غير محدد يأخذ قيمته الافتراضية."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    text: str = Field("Piktor", description="نص العلامة المائية.")
    anchor: Anchor = Field(
        Anchor.bottom_left,
        validation_alias=AliasChoices("anchor", "position"),
        description="الزاوية التي توضع عندها العلامة المائية.",
    )
    font_size: float = Field(40, description="حجم الخط بالبكسل.")
    opacity: float = Field(0.6, description="قيمة الشفافية بين 0 و 1.")
    padding: float = Field(30, description="المسافة من حواف الصورة بالبكسل.")

    @field_validator("opacity")
    @classmethod
    def clamp_opacity(cls, opacity: float) -> float:
        return min(1.0, max(0.0, opacity))

    @field_validator("font_size")
    @classmethod
    def clamp_font_size(cls, font_size: float) -> float:
        return max(MIN_FONT_SIZE, font_size)

    @field_validator("padding")
    @classmethod
    def clamp_padding(cls, padding: float) -> float:
        return max(0.0, padding)


class InlineWatermarkRequest(BaseModel):
    image: str = Field(..., description="الصورة بصيغة data URL (base64).")
    options: WatermarkOptions = Field(default_factory=WatermarkOptions)


class RemoteWatermarkRequest(BaseModel):
    url: str = Field(..., description="رابط الصورة المراد جلبها.")
    options: WatermarkOptions = Field(default_factory=WatermarkOptions)


class WatermarkResponse(BaseModel):
    status: str = "ok"
    image: str


class EligibilityResponse(BaseModel):
    plan_id: str
    apply_watermark: bool
