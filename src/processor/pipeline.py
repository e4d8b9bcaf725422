"""보정 파이프라인 러너.

업로드 직후의 기본 보정(업스케일 → 샤프닝 → 선택적 밝기/채도)과
오버레이 재합성을 파일 단위로 실행한다. 배치는 호출 측에서 순차로 돈다.
"""

from PIL import Image

from core.config import Settings, settings as default_settings
from model.image import EnhanceParams
from processor import codec, operations
from utility.timer import timer

# 리샘플링/필터가 그대로 동작하는 모드
_WORKING_MODES = ("RGB", "RGBA", "L")


def _normalize_mode(image: Image.Image) -> Image.Image:
    if image.mode in _WORKING_MODES:
        return image
    has_alpha = "A" in image.getbands() or "transparency" in image.info
    return image.convert("RGBA" if has_alpha else "RGB")


def enhance(
    image: Image.Image, params: EnhanceParams | None = None, cfg: Settings | None = None
) -> Image.Image:
    """기본 보정 파이프라인을 적용한다."""
    cfg = cfg or default_settings
    params = params or EnhanceParams()

    result = _normalize_mode(image)
    result = operations.upscale(result, factor=cfg.UPSCALE_FACTOR, max_width=cfg.MAX_WIDTH)
    result = operations.sharpen(
        result,
        sigma=params.sharpen or cfg.SHARPEN_SIGMA,
        percent=cfg.SHARPEN_PERCENT,
        threshold=cfg.SHARPEN_THRESHOLD,
    )
    if params.brightness is not None or params.saturation is not None:
        result = operations.modulate(
            result, brightness=params.brightness, saturation=params.saturation
        )
    return result


def enhance_file(
    input_path: str,
    output_path: str,
    params: EnhanceParams | None = None,
    cfg: Settings | None = None,
) -> tuple[int, int]:
    """input_path를 보정해서 output_path에 저장하고 결과 크기를 반환한다."""
    cfg = cfg or default_settings
    with timer(f"enhance {input_path}", level="DEBUG"):
        image = codec.open_image(input_path)
        result = enhance(image, params, cfg)
        codec.save_image(result, output_path, jpeg_quality=cfg.JPEG_QUALITY)
    return result.size


def composite_file(target_path: str, overlay_bytes: bytes, cfg: Settings | None = None) -> bool:
    """overlay를 target 파일에 합성하고 같은 경로에 덮어쓴다.

    overlay가 완전히 투명하면 파일을 다시 쓰지 않는다 (손실 압축 포맷의 재인코딩 방지).
    실제로 파일을 다시 썼으면 True.
    """
    cfg = cfg or default_settings
    overlay = codec.open_image(overlay_bytes)
    if operations.is_blank(overlay):
        return False

    with timer(f"composite {target_path}", level="DEBUG"):
        base = codec.open_image(target_path)
        merged = operations.composite(base, overlay)
        codec.save_image(merged, target_path, jpeg_quality=cfg.JPEG_QUALITY)
    return True
