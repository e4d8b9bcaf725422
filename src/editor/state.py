"""편집기 상태와 전이 함수.

상태는 불변(frozen) 객체이고, 모든 전이 함수는 새 상태를 반환한다.
제스처는 Idle | Drawing | Panning 중 정확히 하나라서
"그리는 중이면서 동시에 패닝 중"인 상태는 표현할 수 없다.

    Idle ──pointer_down(draw)──▶ Drawing ──pointer_up/leave──▶ Idle
    Idle ──pointer_down(pan)───▶ Panning ──pointer_up/leave──▶ Idle
"""

from dataclasses import dataclass, field, replace
from enum import Enum

from editor.mapping import ORIGIN, Point, PointerEvent, SurfaceGeometry, to_pixel

MIN_SCALE = 0.1
MAX_SCALE = 5.0
ZOOM_STEP = 0.1

MIDDLE_BUTTON = 4


class Tool(str, Enum):
    DRAW = "draw"
    PAN = "pan"


# --- 제스처 (tagged union) ---


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Drawing:
    last: Point  # 직전 픽셀 좌표, 다음 선분의 시작점


@dataclass(frozen=True)
class Panning:
    anchor: Point  # 포인터 화면 좌표 - 시작 시점의 pan


Gesture = Idle | Drawing | Panning


@dataclass(frozen=True)
class Segment:
    """원본 해상도 픽셀 공간의 선분 하나."""

    start: Point
    end: Point


@dataclass(frozen=True)
class Viewport:
    scale: float = 1.0
    pan: Point = ORIGIN


@dataclass(frozen=True)
class EditorState:
    viewport: Viewport = field(default_factory=Viewport)
    tool: Tool = Tool.DRAW
    eraser: bool = False
    gesture: Gesture = field(default_factory=Idle)
    brush_color: str = "#ff0000"
    brush_size: int = 10
    pan_key_held: bool = False


# --- 도구 선택 ---


def select_draw(state: EditorState) -> EditorState:
    return replace(state, tool=Tool.DRAW, eraser=False)


def select_pan(state: EditorState) -> EditorState:
    return replace(state, tool=Tool.PAN)


def toggle_eraser(state: EditorState) -> EditorState:
    """지우개는 그리기 도구 하위 옵션이라 켜면 도구도 draw로 바뀐다."""
    return replace(state, tool=Tool.DRAW, eraser=not state.eraser)


def set_brush_color(state: EditorState, color: str) -> EditorState:
    """색을 고르면 지우개는 꺼진다 (그리기 도구일 때)."""
    eraser = False if state.tool is Tool.DRAW else state.eraser
    return replace(state, brush_color=color, eraser=eraser)


def set_brush_size(state: EditorState, size: int) -> EditorState:
    if size < 1:
        raise ValueError("brush size must be positive")
    return replace(state, brush_size=size)


def set_pan_key(state: EditorState, held: bool) -> EditorState:
    return replace(state, pan_key_held=held)


# --- 줌 ---


def clamp_scale(scale: float) -> float:
    return round(min(max(MIN_SCALE, scale), MAX_SCALE), 2)


def set_zoom(state: EditorState, scale: float) -> EditorState:
    return replace(state, viewport=replace(state.viewport, scale=clamp_scale(scale)))


def zoom_in(state: EditorState) -> EditorState:
    return set_zoom(state, state.viewport.scale + ZOOM_STEP)


def zoom_out(state: EditorState) -> EditorState:
    return set_zoom(state, state.viewport.scale - ZOOM_STEP)


def reset_view(state: EditorState) -> EditorState:
    return replace(state, viewport=Viewport())


def wheel(state: EditorState, delta_y: float) -> EditorState:
    """휠을 아래로(deltaY > 0) 굴리면 축소, 위로 굴리면 확대."""
    if delta_y > 0:
        return zoom_out(state)
    if delta_y < 0:
        return zoom_in(state)
    return state


# --- 포인터 제스처 ---


def _wants_pan(state: EditorState, event: PointerEvent) -> bool:
    return state.tool is Tool.PAN or event.buttons == MIDDLE_BUTTON or state.pan_key_held


def pointer_down(
    state: EditorState, event: PointerEvent, geometry: SurfaceGeometry
) -> EditorState:
    if _wants_pan(state, event):
        return replace(state, gesture=Panning(anchor=event.raw - state.viewport.pan))
    return replace(state, gesture=Drawing(last=to_pixel(event, geometry)))


def pointer_move(
    state: EditorState, event: PointerEvent, geometry: SurfaceGeometry
) -> tuple[EditorState, Segment | None]:
    """진행 중인 제스처를 연장한다. 그리는 중이면 새로 그을 선분도 함께 반환."""
    gesture = state.gesture
    if isinstance(gesture, Panning):
        viewport = replace(state.viewport, pan=event.raw - gesture.anchor)
        return replace(state, viewport=viewport), None
    if isinstance(gesture, Drawing):
        current = to_pixel(event, geometry)
        segment = Segment(start=gesture.last, end=current)
        return replace(state, gesture=Drawing(last=current)), segment
    return state, None


def pointer_up(state: EditorState) -> EditorState:
    return replace(state, gesture=Idle())


pointer_leave = pointer_up


# --- 표시용 ---


def cursor(state: EditorState) -> str:
    if isinstance(state.gesture, Panning):
        return "grabbing"
    if state.tool is Tool.PAN or state.pan_key_held:
        return "grab"
    return "crosshair"


def zoom_label(state: EditorState) -> str:
    return f"{round(state.viewport.scale * 100)}%"
