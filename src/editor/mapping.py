"""화면 좌표 ↔ 실제 픽셀 좌표 변환.

드로잉 버퍼는 항상 원본 해상도이고, 줌/팬은 화면에 보이는 모습(transform)만 바꾼다.
포인터 좌표는 "지금 화면에 그려진 사각형" 기준으로 비율 변환하면 되므로
줌/팬 상태와 무관하게 같은 공식이 성립한다.

    pixel = (pointer - 화면상 원점) * (원본 크기 / 화면상 크기)
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)


ORIGIN = Point(0.0, 0.0)


@dataclass(frozen=True)
class Rect:
    """화면상의 사각형 (getBoundingClientRect와 같은 의미)."""

    left: float
    top: float
    width: float
    height: float

    @property
    def center(self) -> Point:
        return Point(self.left + self.width / 2, self.top + self.height / 2)


@dataclass(frozen=True)
class SurfaceGeometry:
    native_width: int
    native_height: int
    screen_rect: Rect


@dataclass(frozen=True)
class PointerEvent:
    """마우스/터치 공통 포인터 이벤트.

    buttons는 마우스 버튼 비트마스크 (1=왼쪽, 4=가운데). 터치는 항상 1.
    """

    client_x: float
    client_y: float
    buttons: int = 1

    @property
    def raw(self) -> Point:
        return Point(self.client_x, self.client_y)

    @classmethod
    def from_mouse(cls, client_x: float, client_y: float, buttons: int = 1) -> "PointerEvent":
        return cls(client_x, client_y, buttons)

    @classmethod
    def from_touch(cls, touches: list[tuple[float, float]]) -> "PointerEvent":
        """첫 번째 터치 지점만 사용한다."""
        if not touches:
            raise ValueError("touch event without touch points")
        x, y = touches[0]
        return cls(x, y, 1)


def to_pixel(event: PointerEvent, geometry: SurfaceGeometry) -> Point:
    rect = geometry.screen_rect
    if rect.width <= 0 or rect.height <= 0:
        raise ValueError("surface has no visible area")
    scale_x = geometry.native_width / rect.width
    scale_y = geometry.native_height / rect.height
    return Point(
        (event.client_x - rect.left) * scale_x,
        (event.client_y - rect.top) * scale_y,
    )


def displayed_rect(layout: Rect, scale: float, pan: Point) -> Rect:
    """translate(pan) scale(scale) 변환 후 화면에 보이는 사각형.

    CSS transform-origin 기본값(중앙) 기준으로 확대/축소한 뒤 pan만큼 이동한다.
    """
    center = layout.center + pan
    width = layout.width * scale
    height = layout.height * scale
    return Rect(center.x - width / 2, center.y - height / 2, width, height)
