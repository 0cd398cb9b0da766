import itertools

import numpy as np
import PIL.Image
import pytest

from mandelview import (
    SET_COLOR,
    Bounded,
    ComplexPoint,
    PixelCoordinate,
    Quit,
    RenderParameters,
    RenderSession,
    RenderState,
    SaveScreenshot,
    ShowCoordinates,
    Viewport,
    ZoomIn,
    ZoomOut,
    evaluate,
    initial_viewport,
    map_color,
    new_render_pass,
    pack_rgb,
    pixel_to_complex,
    spiral_pixels,
)


def make_session(size=8, **kwargs):
    kwargs.setdefault("bailout", 100)
    return RenderSession(Viewport(size, size, -0.5, 0.0, 1.725), **kwargs)


def fake_clock(step=1.0):
    ticks = itertools.count(0.0, step)
    return lambda: next(ticks)


def test_first_pixel_of_default_view():
    viewport = initial_viewport()
    params = RenderParameters(threshold=viewport.delta_x / 4)
    pixel, rgb = next(new_render_pass(viewport, params))

    assert pixel == PixelCoordinate(256, 256)
    point = pixel_to_complex(viewport, pixel.row, pixel.column)
    assert point.x == pytest.approx(viewport.center_x + 0.5 * viewport.delta_x)
    assert point.y == pytest.approx(viewport.center_y - 0.5 * viewport.delta_y)
    assert evaluate(point, params) == Bounded()
    assert rgb == SET_COLOR


def test_render_pass_visits_in_spiral_order():
    viewport = Viewport(5, 3, 0.0, 0.0, 2.0)
    params = RenderParameters(threshold=viewport.threshold, bailout=50)
    visited = [pixel for pixel, _ in new_render_pass(viewport, params)]
    assert visited == list(spiral_pixels(3, 5))


def test_full_pass_fills_buffer(capsys):
    session = make_session()
    session.start()
    assert session.state is RenderState.RENDERING

    assert session.run_to_completion() == 64
    assert session.state is RenderState.IDLE
    assert session.progress == 1.0
    assert "Zoom level 0:" in capsys.readouterr().out

    params = session.params
    for row in range(8):
        for column in range(8):
            expected = map_color(evaluate(pixel_to_complex(session.viewport, row, column), params))
            assert session.buffer[row * 8 + column] == pack_rgb(*expected)


def test_params_follow_viewport():
    julia = ComplexPoint(-0.8, 0.156)
    session = make_session(julia_constant=julia)
    params = session.params
    assert params.threshold == session.viewport.delta_x / 4
    assert params.bailout == 100
    assert params.julia_constant == julia


def test_advance_respects_pixel_budget():
    session = make_session()
    session.start()
    assert session.advance(max_pixels=10) == 10
    assert session.state is RenderState.RENDERING

    drawn = {PixelCoordinate(int(i) // 8, int(i) % 8) for i in np.flatnonzero(session.buffer)}
    assert drawn == set(itertools.islice(spiral_pixels(8, 8), 10))


def test_advance_respects_time_slice():
    session = make_session(clock=fake_clock())
    session.start()
    assert session.advance(time_slice=2.5) == 3


def test_advance_without_pass_does_nothing():
    session = make_session()
    assert session.state is RenderState.IDLE
    assert session.advance() == 0


def test_zoom_in_aborts_pass_and_keeps_partial_image(capsys):
    session = make_session()
    session.start()
    session.advance(max_pixels=5)
    old_viewport = session.viewport

    session.submit(ZoomIn(2, 5))
    assert session.advance(max_pixels=3) == 3

    assert session.state is RenderState.RENDERING
    assert session.viewport.zoom_level == 1
    assert session.viewport.center == pixel_to_complex(old_viewport, 2, 5)
    assert session.viewport.half_span == old_viewport.half_span / 2
    assert session.pixels_drawn == 3
    assert np.count_nonzero(session.buffer) >= 5
    assert "Elapsed" not in capsys.readouterr().out


def test_zoom_out_from_idle_restarts_rendering():
    session = make_session()
    session.start()
    session.run_to_completion()
    old_viewport = session.viewport

    session.submit(ZoomOut(0, 0))
    session.advance(max_pixels=1)

    clicked = pixel_to_complex(old_viewport, 0, 0)
    assert session.state is RenderState.RENDERING
    assert session.viewport.zoom_level == -1
    assert session.viewport.half_span == old_viewport.half_span * 2
    assert session.viewport.center_x == 2 * old_viewport.center_x - clicked.x
    assert session.viewport.center_y == 2 * old_viewport.center_y - clicked.y


def test_queued_clicks_resolve_against_clicked_image():
    reports = []
    session = make_session(on_coordinates=lambda s, mouse: reports.append(mouse))
    session.start()
    old_viewport = session.viewport

    session.submit(ZoomIn(0, 0))
    session.submit(ShowCoordinates(1, 6))
    session.submit(ZoomIn(7, 7))
    session.advance(max_pixels=1)

    assert reports == [pixel_to_complex(old_viewport, 1, 6)]
    assert session.viewport.zoom_level == 2
    assert session.viewport.center == pixel_to_complex(old_viewport, 7, 7)
    assert session.viewport.half_span == old_viewport.half_span / 4


def test_quit_ends_session():
    session = make_session()
    session.start()
    session.advance(max_pixels=2)
    session.submit(Quit())
    session.submit(ZoomIn(0, 0))

    assert session.advance() == 0
    assert session.state is RenderState.DONE
    assert session.viewport.zoom_level == 0

    session.submit(ZoomIn(1, 1))
    session.start()
    assert session.advance() == 0
    assert session.state is RenderState.DONE


def test_screenshot_and_coordinates_do_not_change_state():
    shots, reports = [], []
    session = make_session(
        on_screenshot=shots.append,
        on_coordinates=lambda s, mouse: reports.append(mouse),
    )
    session.start()
    session.submit(SaveScreenshot())
    session.submit(ShowCoordinates(3, 4))
    session.submit(ShowCoordinates())
    session.advance(max_pixels=1)

    assert shots == [session]
    assert reports == [pixel_to_complex(session.viewport, 3, 4), None]
    assert session.state is RenderState.RENDERING
    assert session.viewport.zoom_level == 0


def test_default_coordinate_report(capsys):
    session = make_session()
    session.submit(ShowCoordinates(0, 0))
    session.advance()
    out = capsys.readouterr().out
    assert "Screen coordinates:" in out
    assert "Mouse coordinates:" in out


def test_default_screenshot_writes_png(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    session = make_session(size=6)
    session.start()
    session.run_to_completion()
    session.submit(SaveScreenshot())
    session.advance()

    files = list(tmp_path.glob("mandelview.screenshot.*.png"))
    assert len(files) == 1
    with PIL.Image.open(files[0]) as image:
        assert image.size == (6, 6)
        assert image.getpixel((3, 3)) == map_color(Bounded())
    assert "Saved screenshot" in capsys.readouterr().out


def test_unknown_action_rejected():
    session = make_session()
    session.submit("zoom")
    with pytest.raises(TypeError):
        session.advance()
