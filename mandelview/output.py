"""Screenshot encoding and the coordinate report."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import numpy as np
import PIL.Image

from .palette import buffer_to_rgb
from .viewport import ComplexPoint, Viewport

COORDINATE_DECIMALS = 7
_REPORT_WIDTH = 60


def screenshot_filename(now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    millis = now.microsecond // 1000
    return now.strftime("mandelview.screenshot.%Y%m%d.%H%M%S.") + f"{millis:03d}.png"


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def buffer_to_image(buffer: np.ndarray, width: int, height: int) -> PIL.Image.Image:
    return PIL.Image.fromarray(buffer_to_rgb(buffer, width, height))


def save_screenshot(buffer: np.ndarray, width: int, height: int, path: str | Path | None = None) -> Path:
    """Write the packed ``buffer`` to ``path`` (a timestamped PNG by default)."""

    output_path = Path(path) if path is not None else Path(screenshot_filename())
    image_format = output_path.suffix.lstrip(".") or "png"
    if not output_path.suffix:
        output_path = output_path.with_suffix(".png")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    buffer_to_image(buffer, width, height).save(str(output_path), format=_pil_format_name(image_format))
    return output_path


def _format_point(point: ComplexPoint) -> str:
    return f"({round(point.x, COORDINATE_DECIMALS)}, {round(point.y, COORDINATE_DECIMALS)})"


def format_coordinates(viewport: Viewport, mouse: ComplexPoint | None = None) -> str:
    """Render the viewport corners, center and mouse position as a text box."""

    corners = {name: _format_point(point) for name, point in viewport.corners().items()}
    half = (_REPORT_WIDTH - 2) // 2
    rule = "-" * (_REPORT_WIDTH + 2)
    lines = [
        "Screen coordinates:",
        rule,
        f"|{corners['upper_left']:<{half}}  {corners['upper_right']:>{half}}|",
        f"|{corners['center']:^{_REPORT_WIDTH}}|",
        f"|{corners['lower_left']:<{half}}  {corners['lower_right']:>{half}}|",
        rule,
        f"Zoom level:  {viewport.zoom_level}",
    ]
    if mouse is not None:
        lines.append(f"Mouse coordinates:  {_format_point(mouse)}")
    return "\n".join(lines)
