"""
Application entry point — CLI parsing, validation, terminal or Qt launch.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__


def _check_qt() -> list:
    missing = []
    try:
        import PyQt5  # noqa: F401
    except ImportError:
        missing.append("PyQt5")
    return missing


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="metaballs",
        description="Metaballs — animated implicit surfaces rendered as text.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  %(prog)s                          # 5 bouncing blobs, cycling modes\n"
            "  %(prog)s --mode contour --cycle 0  # contour mode only\n"
            "  %(prog)s --preset orbit --color    # orbiting blobs, monochrome ramp\n"
            "  %(prog)s --scheme lava --blobs 8   # 8 blobs, lava colours\n"
            "  %(prog)s --qt                      # Qt window instead of terminal\n"
            "  %(prog)s --list-modes              # show render modes\n"
        ),
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--mode", type=str, default="gradient", help="Starting render mode")
    p.add_argument("--cycle", type=float, default=5.0, help="Seconds per mode, 0 = no cycling (default 5)")
    p.add_argument("--blobs", type=int, default=5, help="Number of blobs for the bounce preset (1–32, default 5)")
    p.add_argument("--preset", type=str, default="bounce", help="Blob motion: bounce or orbit")
    p.add_argument("--seed", type=int, default=None, help="RNG seed for reproducible runs")
    p.add_argument("--threshold", type=float, default=1.0, help="Isosurface threshold (default 1.0)")
    p.add_argument("--edges", type=str, default="ignore", help="Contour border policy: ignore or outside")
    p.add_argument("--cols", type=int, default=80, help="Grid columns (default 80)")
    p.add_argument("--rows", type=int, default=35, help="Grid rows (default 35)")
    p.add_argument("--fps", type=float, default=30.0, help="Target frame rate (default 30)")
    p.add_argument("--frames", type=int, default=None, help="Stop after N frames")
    p.add_argument("--scheme", type=str, default=None, help="Colour scheme (implies --color)")
    p.add_argument("--color", action="store_true", help="Colour output")
    p.add_argument("--rgb", type=str, default=None, help="Custom base colour R,G,B or #rrggbb (implies --color)")
    p.add_argument("--qt", action="store_true", help="Open a Qt window")
    p.add_argument("--list-modes", action="store_true", help="List render modes and exit")
    p.add_argument("--list-schemes", action="store_true", help="List colour schemes and exit")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return p.parse_args(argv)


def _fail(message: str) -> None:
    print(f"ERROR: {message}", file=sys.stderr)
    sys.exit(1)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    logger = logging.getLogger("metaballs")

    from .engine import PRESETS, MetaballScene, SceneParams
    from .palettes import DEFAULT_SCHEME, SCHEMES, create_custom_scheme, get_scheme, list_schemes, parse_rgb
    from .renderer import EDGE_POLICIES, ModeCycler, RenderMode

    if args.list_modes:
        print("Available render modes:")
        for mode in RenderMode:
            print(f"  {mode.value}")
        sys.exit(0)

    if args.list_schemes:
        print("Available colour schemes:")
        for key in list_schemes():
            s = SCHEMES[key]
            print(f"  {key:10s}  {s.name:14s}  base=rgb{s.base}  hot=rgb{s.hot}")
        sys.exit(0)

    # Validate
    try:
        mode = RenderMode.from_name(args.mode)
    except KeyError as exc:
        _fail(exc.args[0])
    if args.preset not in PRESETS:
        _fail(f"Unknown preset '{args.preset}'. Available: {', '.join(PRESETS)}")
    if args.edges not in EDGE_POLICIES:
        _fail(f"Unknown edge policy '{args.edges}'. Available: {', '.join(EDGE_POLICIES)}")
    if not (1 <= args.blobs <= 32):
        _fail("--blobs must be 1–32.")
    if args.cols < 1 or args.rows < 1:
        _fail("--cols and --rows must be positive.")
    if args.threshold <= 0:
        _fail("--threshold must be positive.")
    if args.fps <= 0:
        _fail("--fps must be positive.")

    scheme = None
    if args.rgb:
        try:
            scheme = create_custom_scheme("Custom", parse_rgb(args.rgb))
        except ValueError as exc:
            _fail(str(exc))
    elif args.scheme or args.color or args.qt:
        try:
            scheme = get_scheme(args.scheme or DEFAULT_SCHEME)
        except KeyError as exc:
            _fail(exc.args[0])

    params = SceneParams(width=float(args.cols), height=float(args.rows), threshold=args.threshold)
    scene = MetaballScene(blob_count=args.blobs, params=params, seed=args.seed, preset=args.preset)
    cycler = ModeCycler(mode, period=args.cycle, edge_policy=args.edges)

    logger.info("Starting Metaballs v%s", __version__)
    logger.debug("Grid %dx%d, mode %s, preset %s", args.cols, args.rows, mode.title, args.preset)

    if args.qt:
        missing = _check_qt()
        if missing:
            _fail(f"Missing packages: {', '.join(missing)}\nInstall: pip install {' '.join(missing)}")

        from PyQt5.QtWidgets import QApplication
        from .canvas import MetaballCanvas
        from .main_window import MainWindow

        app = QApplication(sys.argv)
        app.setStyle("Fusion")
        app.setApplicationName("Metaballs")
        app.setApplicationVersion(__version__)

        canvas = MetaballCanvas(scene, cycler, scheme, rows=args.rows, cols=args.cols)
        window = MainWindow(canvas)
        window.show()
        sys.exit(app.exec_())

    from .terminal import TerminalDriver

    driver = TerminalDriver(
        scene, cycler, rows=args.rows, cols=args.cols, fps=args.fps, scheme=scheme,
    )
    driver.run(max_frames=args.frames)
