"""원본 해상도 드로잉 버퍼.

화면 크기와 상관없이 대상 이미지와 같은 픽셀 크기의 투명 RGBA 레이어에 그린다.
지우개는 픽셀을 완전 투명으로 되돌린다 (destination-out).
"""

from PIL import Image, ImageColor, ImageDraw

from editor.state import Segment
from processor import codec, operations

TRANSPARENT = (0, 0, 0, 0)


class DrawingSurface:
    def __init__(self, width: int, height: int):
        if width < 1 or height < 1:
            raise ValueError(f"invalid surface size {width}x{height}")
        self.width = width
        self.height = height
        self.image = Image.new("RGBA", (width, height), TRANSPARENT)

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def brush_width(self, size: int) -> int:
        """브러시 크기를 이미지 폭에 비례시킨다 (폭 1000px에서 size*2)."""
        return max(1, round(size * self.width / 1000 * 2))

    def stroke(self, segment: Segment, color: str, size: int, eraser: bool = False) -> None:
        """양 끝이 둥근 선분을 그린다."""
        fill = TRANSPARENT if eraser else ImageColor.getrgb(color)
        if len(fill) == 3:
            fill = (*fill, 255)

        width = self.brush_width(size)
        start = (segment.start.x, segment.start.y)
        end = (segment.end.x, segment.end.y)

        # ImageDraw는 합성하지 않고 값을 그대로 쓰므로 투명색으로 그리면 지워진다
        draw = ImageDraw.Draw(self.image)
        draw.line([start, end], fill=fill, width=width)
        radius = width / 2
        for x, y in (start, end):
            draw.ellipse([x - radius, y - radius, x + radius, y + radius], fill=fill)

    def clear(self) -> None:
        self.image = Image.new("RGBA", self.size, TRANSPARENT)

    def is_blank(self) -> bool:
        return operations.is_blank(self.image)

    def to_data_url(self) -> str:
        return codec.encode_data_url(self.image)
