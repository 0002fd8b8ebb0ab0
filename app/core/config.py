from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """إعدادات خدمة العلامة المائية مع تحميل القيم من ملف .env عند توفره."""

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parents[2] / ".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Image Watermark API"
    app_version: str = "0.1.0"
    log_level: str = "INFO"

    allow_origins: list[str] = Field(default_factory=lambda: ["*"])

    # جلب الصور البعيدة
    fetch_timeout: float = 30.0
    allowed_remote_hosts: list[str] = Field(default_factory=list)
    user_agent: str = "ImageWatermarkAPI/0.1"

    # الرسم والترميز
    font_path: Optional[Path] = None
    jpeg_quality: int = Field(default=95, ge=1, le=100)


@lru_cache()
def get_settings() -> Settings:
    return Settings()
