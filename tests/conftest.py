from io import BytesIO

import pytest
from PIL import Image

from app.core.config import Settings


def make_image(fmt: str = "PNG", size=(200, 200), mode: str = "RGB", color=(0, 0, 0)) -> bytes:
    image = Image.new(mode, size, color)
    buffer = BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def settings() -> Settings:
    return Settings(font_path=None, allowed_remote_hosts=[], fetch_timeout=5.0)


@pytest.fixture
def png_bytes() -> bytes:
    return make_image("PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image("JPEG", color=(40, 80, 120))
