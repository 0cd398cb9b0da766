"""Console output: the verbose-only ``log`` helper and viewer banners."""

from __future__ import annotations

VERBOSE = False


def set_verbose(enabled: bool) -> None:
    global VERBOSE
    VERBOSE = bool(enabled)


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


INSTRUCTIONS = """\
Instructions:

 * Left-click to zoom in.
 * Right-click to zoom out.
 * Press S to save a screenshot.
 * Press C to print coordinates (to this console).
 * Press the Q key or the Escape key to quit.
"""


def print_welcome() -> None:
    print()
    print("---=== mandelview: a Mandelbrot and Julia set viewer ===---")
    print()
    print(INSTRUCTIONS)
