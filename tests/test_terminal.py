import io
import itertools

from metaballs.engine import MetaballScene, SceneParams
from metaballs.palettes import get_scheme
from metaballs.renderer import ModeCycler, RenderMode, render_frame
from metaballs.terminal import HIDE_CURSOR, SHOW_CURSOR, TerminalDriver, colorize


def make_driver(**kwargs):
    params = SceneParams(width=20.0, height=8.0)
    scene = MetaballScene(blob_count=2, params=params, seed=5)
    cycler = ModeCycler(RenderMode.SOLID, period=0)
    stream = io.StringIO()
    driver = TerminalDriver(scene, cycler, rows=8, cols=20, stream=stream, **kwargs)
    return driver, stream


def fake_clock(step=0.001):
    ticks = itertools.count(0.0, step)
    return lambda: next(ticks)


def test_run_draws_frames_and_restores_cursor():
    driver, stream = make_driver()
    sleeps = []
    drawn = driver.run(max_frames=3, clock=fake_clock(), sleep=sleeps.append)
    out = stream.getvalue()
    assert drawn == 3
    assert out.startswith(HIDE_CURSOR)
    assert SHOW_CURSOR in out
    assert "Metaballs [Solid] | Frame: 3" in out
    assert len(sleeps) == 3
    assert all(0 < s < 1.0 / 30 for s in sleeps)


def test_fixed_dt_advances_scene():
    driver, _ = make_driver(dt=0.05)
    driver.run(max_frames=4, clock=fake_clock(), sleep=lambda s: None)
    assert abs(driver.scene.time - 0.2) < 1e-9


def test_wall_clock_dt():
    driver, _ = make_driver(dt=None)
    driver.run(max_frames=2, clock=fake_clock(0.01), sleep=lambda s: None)
    assert driver.scene.time > 0.0


def test_tick_returns_full_frame():
    driver, _ = make_driver()
    frame = driver.tick(0.05)
    assert frame.chars.shape == (8, 20)
    assert driver.frame_count == 1


def test_keyboard_interrupt_stops_cleanly():
    driver, stream = make_driver()

    def interrupt(_seconds):
        raise KeyboardInterrupt

    assert driver.run(clock=fake_clock(), sleep=interrupt) == 1
    assert stream.getvalue().endswith(SHOW_CURSOR + "\n")


def test_colorize():
    scene = MetaballScene(blob_count=3, seed=2)
    frame = render_frame(scene, ModeCycler(RenderMode.GRADIENT).renderer, rows=6, cols=10)
    text = colorize(frame, get_scheme("lava"))
    assert text.count("\n") == 5
    assert text.count("\x1b[0m") == 6
    if (frame.chars != " ").any():
        assert "\x1b[38;2;" in text
