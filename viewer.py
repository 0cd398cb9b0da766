import math
import os
from argparse import ArgumentParser, ArgumentTypeError
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from mandelview import ComplexPoint, RenderParameters, RenderSession, Viewport, initial_viewport
from mandelview.console import log, print_welcome, set_verbose
from mandelview.output import save_screenshot
from mandelview.viewport import DEFAULT_WINDOW_SIZE


@dataclass(frozen=True)
class ViewerConfig:
    size: int
    bailout: Optional[int]
    julia_constant: Optional[ComplexPoint]
    output: Optional[Path]
    verbose: bool

    @property
    def title(self) -> str:
        if self.julia_constant is None:
            return "The Mandelbrot Set"
        return f"Julia Set for c = {self.julia_constant.x} + {self.julia_constant.y}i"


def positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise ArgumentTypeError(f'invalid value "{text}"') from None
    if value <= 0:
        raise ArgumentTypeError(f"NUMBER must be more than zero, got {value}")
    return value


def non_negative_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise ArgumentTypeError(f'invalid value "{text}"') from None
    if value < 0:
        raise ArgumentTypeError(f"NUMBER must not be negative, got {value}")
    return value


def julia_constant(text: str) -> ComplexPoint:
    parts = text.split(",")
    if len(parts) != 2:
        raise ArgumentTypeError(f"the X,Y value ({text}) needs exactly one comma")
    values = []
    for label, part in zip("XY", parts):
        try:
            value = float(part)
        except ValueError:
            raise ArgumentTypeError(f"the {label} value in X,Y ({text}) is not a valid number") from None
        if not math.isfinite(value):
            raise ArgumentTypeError(f"the {label} value in X,Y ({text}) must be finite")
        values.append(value)
    return ComplexPoint(*values)


def build_parser():
    parser = ArgumentParser(
        description="An interactive Mandelbrot and Julia set viewer.",
        epilog="Left-click zooms in, right-click zooms out, C prints coordinates, "
               "S saves a screenshot, Q or Escape quits.",
    )

    parser.add_argument('--size', type=positive_int,
                        dest='size', help='show the image in a square window of SIZE by SIZE pixels',
                        metavar='SIZE', default=DEFAULT_WINDOW_SIZE)

    parser.add_argument('--bailout', type=non_negative_int,
                        dest='bailout', help='maximum number of iterations; points that reach it count as part of the set (unbounded by default)',
                        metavar='BAILOUT', default=None)

    parser.add_argument('--julia', type=julia_constant,
                        dest='julia', help='draw the Julia set for c = X+Yi instead of the Mandelbrot set (use --julia=X,Y for negative X)',
                        metavar='X,Y', default=None)

    parser.add_argument('--output', type=str,
                        dest='output', help='render the starting view to this image file and exit without opening a window',
                        metavar='PATH', default=None)

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow diagnostics for --output.')

    return parser


def resolve_config(opt) -> ViewerConfig:
    output = Path(opt.output).expanduser().resolve() if opt.output else None
    return ViewerConfig(
        size=opt.size,
        bailout=opt.bailout,
        julia_constant=opt.julia,
        output=output,
        verbose=bool(opt.verbose),
    )


def _quiet_tensorflow(verbose: bool) -> None:
    if not verbose and os.environ.get("TF_CPP_MIN_LOG_LEVEL") is None:
        os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"


def render_to_file(config: ViewerConfig, viewport: Viewport) -> Path:
    """Render ``viewport`` in one batch and write it to ``config.output``."""

    _quiet_tensorflow(config.verbose)
    import tensorflow as tf

    from mandelview.batch import render_frame

    log("TensorFlow version: %s" % tf.__version__)
    params = RenderParameters(
        threshold=viewport.threshold,
        bailout=config.bailout,
        julia_constant=config.julia_constant,
    )
    result = render_frame(viewport, params)
    path = save_screenshot(result.buffer, viewport.width, viewport.height, config.output)
    print(f"Saved image to a file named:  {path}")
    return path


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)
    config = resolve_config(opt)
    set_verbose(config.verbose)

    viewport = initial_viewport(config.size, julia=config.julia_constant is not None)
    log("Starting viewport: %r" % (viewport,))

    if config.output is not None:
        render_to_file(config, viewport)
        return

    from mandelview.display import ViewerWindow

    print_welcome()
    session = RenderSession(viewport, bailout=config.bailout, julia_constant=config.julia_constant)
    ViewerWindow(session, title=config.title).show()


if __name__ == '__main__':
    main()
