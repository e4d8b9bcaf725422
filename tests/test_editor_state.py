"""편집기 상태 전이 테스트."""

import pytest

from editor import state as st
from editor.mapping import PointerEvent, Point, Rect, SurfaceGeometry

GEOMETRY = SurfaceGeometry(native_width=200, native_height=100, screen_rect=Rect(0, 0, 400, 200))


class TestTools:
    def test_defaults(self):
        state = st.EditorState()

        assert state.tool is st.Tool.DRAW
        assert state.eraser is False
        assert isinstance(state.gesture, st.Idle)
        assert state.viewport.scale == 1.0

    def test_toggle_eraser_switches_to_draw(self):
        state = st.toggle_eraser(st.select_pan(st.EditorState()))

        assert state.tool is st.Tool.DRAW
        assert state.eraser is True
        assert st.toggle_eraser(state).eraser is False

    def test_select_draw_turns_eraser_off(self):
        state = st.select_draw(st.toggle_eraser(st.EditorState()))

        assert state.eraser is False

    def test_color_turns_eraser_off(self):
        state = st.set_brush_color(st.toggle_eraser(st.EditorState()), "#00ff00")

        assert state.brush_color == "#00ff00"
        assert state.eraser is False

    def test_brush_size_must_be_positive(self):
        with pytest.raises(ValueError):
            st.set_brush_size(st.EditorState(), 0)

    def test_transitions_do_not_mutate(self):
        state = st.EditorState()
        st.select_pan(state)

        assert state.tool is st.Tool.DRAW


class TestZoom:
    def test_step(self):
        state = st.zoom_in(st.EditorState())
        assert state.viewport.scale == pytest.approx(1.1)

        state = st.zoom_out(st.zoom_out(state))
        assert state.viewport.scale == pytest.approx(0.9)

    def test_clamped(self):
        state = st.EditorState()
        for _ in range(100):
            state = st.zoom_in(state)
        assert state.viewport.scale == st.MAX_SCALE

        for _ in range(100):
            state = st.zoom_out(state)
        assert state.viewport.scale == st.MIN_SCALE

    def test_set_zoom_clamps(self):
        assert st.set_zoom(st.EditorState(), 42).viewport.scale == 5.0
        assert st.set_zoom(st.EditorState(), -3).viewport.scale == 0.1

    def test_wheel_direction(self):
        state = st.EditorState()

        assert st.wheel(state, 120).viewport.scale == pytest.approx(0.9)
        assert st.wheel(state, -120).viewport.scale == pytest.approx(1.1)
        assert st.wheel(state, 0) == state

    def test_reset_view(self):
        state = st.set_zoom(st.EditorState(), 3.0)
        state = st.select_pan(state)
        state = st.pointer_down(state, PointerEvent(10, 10), GEOMETRY)
        state, _ = st.pointer_move(state, PointerEvent(60, 90), GEOMETRY)

        state = st.reset_view(st.pointer_up(state))

        assert state.viewport == st.Viewport(scale=1.0, pan=Point(0, 0))

    def test_zoom_label(self):
        assert st.zoom_label(st.set_zoom(st.EditorState(), 1.5)) == "150%"


class TestGestures:
    def test_draw_stroke(self):
        state = st.pointer_down(st.EditorState(), PointerEvent(20, 20), GEOMETRY)
        assert state.gesture == st.Drawing(last=Point(10, 10))

        state, segment = st.pointer_move(state, PointerEvent(60, 40), GEOMETRY)
        assert segment == st.Segment(start=Point(10, 10), end=Point(30, 20))
        assert state.gesture == st.Drawing(last=Point(30, 20))

        state, segment = st.pointer_move(state, PointerEvent(80, 40), GEOMETRY)
        assert segment.start == Point(30, 20)

        state = st.pointer_up(state)
        assert isinstance(state.gesture, st.Idle)

    def test_move_while_idle_does_nothing(self):
        state = st.EditorState()
        new_state, segment = st.pointer_move(state, PointerEvent(5, 5), GEOMETRY)

        assert segment is None
        assert new_state == state

    def test_pan_gesture(self):
        state = st.select_pan(st.EditorState())
        state = st.pointer_down(state, PointerEvent(100, 100), GEOMETRY)
        assert state.gesture == st.Panning(anchor=Point(100, 100))

        state, segment = st.pointer_move(state, PointerEvent(130, 80), GEOMETRY)
        assert segment is None
        assert state.viewport.pan == Point(30, -20)

        # 두 번째 패닝은 현재 pan에서 이어진다
        state = st.pointer_leave(state)
        state = st.pointer_down(state, PointerEvent(0, 0), GEOMETRY)
        state, _ = st.pointer_move(state, PointerEvent(10, 10), GEOMETRY)
        assert state.viewport.pan == Point(40, -10)

    def test_middle_button_pans_in_draw_mode(self):
        state = st.pointer_down(st.EditorState(), PointerEvent(5, 5, buttons=4), GEOMETRY)

        assert isinstance(state.gesture, st.Panning)
        assert state.tool is st.Tool.DRAW

    def test_pan_key_pans_in_draw_mode(self):
        state = st.set_pan_key(st.EditorState(), True)
        state = st.pointer_down(state, PointerEvent(5, 5), GEOMETRY)

        assert isinstance(state.gesture, st.Panning)

    def test_gesture_is_exclusive(self):
        """새 pointer_down은 이전 제스처를 대체한다 (동시에 두 상태 불가)."""
        state = st.pointer_down(st.EditorState(), PointerEvent(5, 5), GEOMETRY)
        state = st.pointer_down(st.select_pan(state), PointerEvent(5, 5), GEOMETRY)

        assert isinstance(state.gesture, st.Panning)

    def test_cursor(self):
        state = st.EditorState()
        assert st.cursor(state) == "crosshair"

        state = st.select_pan(state)
        assert st.cursor(state) == "grab"

        state = st.pointer_down(state, PointerEvent(1, 1), GEOMETRY)
        assert st.cursor(state) == "grabbing"
