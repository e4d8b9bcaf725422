"""
순수 이미지 처리 함수.
모든 함수는 PIL.Image를 받아서 새 PIL.Image를 반환한다 (입력은 건드리지 않음).
"""

from PIL import Image, ImageEnhance, ImageFilter


def upscale(image: Image.Image, factor: int = 2, max_width: int = 4000) -> Image.Image:
    """가로를 factor배로 키우되 max_width를 넘지 않는다. 세로는 비율 유지."""
    width = min(image.width * factor, max_width)
    height = max(1, round(image.height * width / image.width))
    return image.resize((width, height), Image.LANCZOS)


def sharpen(
    image: Image.Image, sigma: float = 1.5, percent: int = 150, threshold: int = 3
) -> Image.Image:
    return image.filter(ImageFilter.UnsharpMask(radius=sigma, percent=percent, threshold=threshold))


def modulate(
    image: Image.Image, brightness: float | None = None, saturation: float | None = None
) -> Image.Image:
    """밝기/채도 배율 조정. 1.0이 원본, None은 해당 단계 생략.

    알파 채널은 조정 대상에서 제외하고 그대로 다시 붙인다.
    """
    alpha = image.getchannel("A") if image.mode == "RGBA" else None
    result = image.convert("RGB") if alpha is not None else image

    if brightness is not None:
        result = ImageEnhance.Brightness(result).enhance(brightness)
    if saturation is not None:
        result = ImageEnhance.Color(result).enhance(saturation)

    if alpha is not None:
        result = result.convert("RGBA")
        result.putalpha(alpha)
    return result


def is_blank(overlay: Image.Image) -> bool:
    """투명하지 않은 픽셀이 하나도 없으면 True."""
    if overlay.mode != "RGBA":
        overlay = overlay.convert("RGBA")
    return overlay.getchannel("A").getbbox() is None


def composite(base: Image.Image, overlay: Image.Image) -> Image.Image:
    """overlay를 base 위에 알파 합성한다. 결과는 base와 같은 모드로 돌려준다.

    두 레이어의 크기가 다르면 ValueError.
    """
    if base.size != overlay.size:
        raise ValueError(f"overlay size {overlay.size} does not match image size {base.size}")

    merged = Image.alpha_composite(base.convert("RGBA"), overlay.convert("RGBA"))
    if base.mode == "RGBA":
        return merged
    return merged.convert(base.mode)
