"""편집 세션: 이미지 하나에 대한 브러시 보정 작업 단위.

순서 보장:
    1. 대상 이미지를 받아서 디코딩하고 픽셀 크기를 확인한다
    2. 그 크기로 드로잉 버퍼를 만든다
    3. 포인터 입력으로 버퍼에 그린다
    4. submit() → /reprocess, 성공하면 버퍼를 비우고 표시 URL을 갱신

드로잉 버퍼 크기는 1에서 확정된 값만 쓰므로, 이미지 로드 전에 그리기가 시작될 일은 없다.
"""

from contextlib import contextmanager

from loguru import logger

from editor import state as st
from editor.client import EnhancerClient
from editor.mapping import PointerEvent, Rect, SurfaceGeometry, displayed_rect
from editor.surface import DrawingSurface
from processor import codec


class EditorBusy(Exception):
    """전송 중에 다시 전송하려 한 경우."""


class EditorSession:
    def __init__(
        self,
        client: EnhancerClient,
        filename: str,
        url: str,
        size: tuple[int, int],
        layout: Rect | None = None,
    ):
        self.client = client
        self.filename = filename
        self.display_url = url
        self.surface = DrawingSurface(*size)
        self.state = st.EditorState()
        # 줌/팬 적용 전 화면 배치. 기본은 1:1
        self.layout = layout or Rect(0, 0, size[0], size[1])
        self.busy = False

    @classmethod
    def open(
        cls, client: EnhancerClient, filename: str, url: str, layout: Rect | None = None
    ) -> "EditorSession":
        """이미지를 먼저 받아 픽셀 크기를 확인한 뒤 세션을 만든다."""
        image = codec.open_image(client.fetch_image(url))
        logger.debug(f"Editing {filename} ({image.width}x{image.height})")
        return cls(client, filename, url, image.size, layout)

    # --- 좌표 ---

    @property
    def geometry(self) -> SurfaceGeometry:
        """현재 줌/팬이 반영된 화면상 위치."""
        viewport = self.state.viewport
        return SurfaceGeometry(
            native_width=self.surface.width,
            native_height=self.surface.height,
            screen_rect=displayed_rect(self.layout, viewport.scale, viewport.pan),
        )

    # --- 도구/줌 ---

    def select_draw(self) -> None:
        self.state = st.select_draw(self.state)

    def select_pan(self) -> None:
        self.state = st.select_pan(self.state)

    def toggle_eraser(self) -> None:
        self.state = st.toggle_eraser(self.state)

    def set_brush_color(self, color: str) -> None:
        self.state = st.set_brush_color(self.state, color)

    def set_brush_size(self, size: int) -> None:
        self.state = st.set_brush_size(self.state, size)

    def set_pan_key(self, held: bool) -> None:
        self.state = st.set_pan_key(self.state, held)

    def zoom_in(self) -> None:
        self.state = st.zoom_in(self.state)

    def zoom_out(self) -> None:
        self.state = st.zoom_out(self.state)

    def reset_view(self) -> None:
        self.state = st.reset_view(self.state)

    def wheel(self, delta_y: float) -> None:
        self.state = st.wheel(self.state, delta_y)

    def clear(self) -> None:
        self.surface.clear()

    # --- 포인터 ---

    def pointer_down(self, event: PointerEvent) -> None:
        self.state = st.pointer_down(self.state, event, self.geometry)

    def pointer_move(self, event: PointerEvent) -> None:
        self.state, segment = st.pointer_move(self.state, event, self.geometry)
        if segment is not None:
            self.surface.stroke(
                segment, self.state.brush_color, self.state.brush_size, eraser=self.state.eraser
            )

    def pointer_up(self) -> None:
        self.state = st.pointer_up(self.state)

    def pointer_leave(self) -> None:
        self.state = st.pointer_leave(self.state)

    # --- 전송 ---

    @contextmanager
    def _in_flight(self):
        if self.busy:
            raise EditorBusy(f"{self.filename}: submit already in progress")
        self.busy = True
        try:
            yield
        finally:
            self.busy = False

    def submit(self) -> str:
        """드로잉 버퍼를 오버레이로 보내 서버 이미지에 합성한다.

        성공하면 버퍼를 비우고(이미 서버 이미지에 반영됨) 캐시 무효화 URL을 반환.
        실패하면 ApiError가 올라가고 그린 내용은 남아 있다.
        """
        with self._in_flight():
            url = self.client.reprocess(self.filename, self.surface.to_data_url())
        self.surface.clear()
        self.display_url = url
        return url
