"""이미지 인코딩/디코딩 헬퍼.

- 브라우저 캔버스의 data URL ("data:image/png;base64,...") ↔ bytes
- 확장자 기준 저장 (JPEG/BMP처럼 알파를 못 담는 포맷은 RGB로 변환)
"""

import base64
import binascii
import io
import os
import re

from PIL import Image

DATA_URL_PREFIX = re.compile(r"^data:image/[\w.+-]+;base64,")

# 알파 채널을 저장할 수 없는 포맷
_NO_ALPHA_FORMATS = {"JPEG", "BMP"}


def decode_data_url(text: str) -> bytes:
    """data URL 또는 순수 base64 문자열을 bytes로 디코딩한다.

    잘못된 base64면 ValueError.
    """
    payload = DATA_URL_PREFIX.sub("", text.strip(), count=1)
    try:
        return base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"invalid base64 payload: {e}") from e


def encode_data_url(image: Image.Image) -> str:
    """이미지를 PNG data URL로 인코딩한다."""
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


def open_image(source: bytes | str) -> Image.Image:
    """bytes 또는 경로에서 이미지를 열고 픽셀까지 읽어 둔다.

    파일 핸들을 바로 닫기 위해 load()를 호출한다 (같은 경로에 다시 쓰기 위함).
    디코딩 실패 시 PIL.UnidentifiedImageError / OSError가 그대로 올라간다.
    """
    if isinstance(source, bytes):
        image = Image.open(io.BytesIO(source))
        image.load()
        return image

    with Image.open(source) as image:
        image.load()
        return image.copy()


def format_for(path: str) -> str:
    """확장자에서 Pillow 포맷 이름을 찾는다. 모르는 확장자면 ValueError."""
    ext = os.path.splitext(path)[1].lower()
    fmt = Image.registered_extensions().get(ext)
    if not fmt:
        raise ValueError(f"unknown image extension: {ext or '(none)'}")
    return fmt


def save_image(image: Image.Image, path: str, jpeg_quality: int = 95) -> None:
    """확장자에 맞는 포맷으로 저장한다."""
    fmt = format_for(path)
    if fmt in _NO_ALPHA_FORMATS and image.mode not in ("RGB", "L"):
        image = image.convert("RGB")

    options = {}
    if fmt == "JPEG":
        options["quality"] = jpeg_quality
    image.save(path, format=fmt, **options)
