"""Whole-frame evaluation of the escape kernel with TensorFlow."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
import tensorflow as tf

from .escape import ESCAPE_RADIUS_SQUARED, RenderParameters
from .palette import map_colors
from .viewport import Viewport


@dataclass(frozen=True)
class FrameResult:
    """Per-pixel classification of a full frame, rows top to bottom."""

    iterations: np.ndarray
    escaped: np.ndarray
    buffer: np.ndarray
    viewport: Viewport


def _square_step(xs: tf.Tensor, ys: tf.Tensor, cx: tf.Tensor, cy: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor]:
    x_squared = xs * xs
    y_squared = ys * ys
    return x_squared - y_squared + cx, 2.0 * xs * ys + cy


@tf.function
def _fast_step(xf, yf, cx, cy, counts, active, escaped, bailout):
    """Radius test then one update, for points still in play."""

    radius = xf * xf + yf * yf
    escaping = tf.logical_and(active, radius > ESCAPE_RADIUS_SQUARED)
    escaped = tf.logical_or(escaped, escaping)
    active = tf.logical_and(active, tf.logical_not(escaping))

    xf_new, yf_new = _square_step(xf, yf, cx, cy)
    xf = tf.where(active, xf_new, xf)
    yf = tf.where(active, yf_new, yf)
    counts = counts + tf.cast(active, counts.dtype)

    capped = tf.logical_and(tf.greater_equal(bailout, 0), tf.greater_equal(counts, bailout))
    active = tf.logical_and(active, tf.logical_not(capped))
    return xf, yf, counts, active, escaped


@tf.function
def _escape_run(px: tf.Tensor, py: tf.Tensor, cx: tf.Tensor, cy: tf.Tensor, threshold: tf.Tensor, bailout: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor]:
    """Iterate every point until it escapes, meets its slow orbit or hits the cap.

    ``bailout`` < 0 means no cap. A zero ``threshold`` reduces the tolerance
    test to exact equality for finite values.
    """

    counts = tf.zeros_like(px, dtype=tf.int64)
    active = tf.ones_like(px, dtype=tf.bool)
    escaped = tf.zeros_like(px, dtype=tf.bool)

    def cond(xf, yf, xs, ys, counts, active, escaped):
        return tf.reduce_any(active)

    def body(xf, yf, xs, ys, counts, active, escaped):
        xf, yf, counts, active, escaped = _fast_step(xf, yf, cx, cy, counts, active, escaped, bailout)
        xf, yf, counts, active, escaped = _fast_step(xf, yf, cx, cy, counts, active, escaped, bailout)

        xs_new, ys_new = _square_step(xs, ys, cx, cy)
        xs = tf.where(active, xs_new, xs)
        ys = tf.where(active, ys_new, ys)

        meet = tf.logical_and(
            tf.abs(xf - xs) <= threshold,
            tf.abs(yf - ys) <= threshold,
        )
        active = tf.logical_and(active, tf.logical_not(meet))
        return xf, yf, xs, ys, counts, active, escaped

    _, _, _, _, counts, _, escaped = tf.while_loop(cond, body, (px, py, px, py, counts, active, escaped))
    return counts, escaped


def pixel_grid(viewport: Viewport) -> tuple[np.ndarray, np.ndarray]:
    """Plane coordinates of every pixel center, each of shape ``(height, width)``."""

    columns = np.arange(viewport.width, dtype=np.float64)
    rows = np.arange(viewport.height, dtype=np.float64)
    x = viewport.min_x + viewport.delta_x * (columns + 0.5)
    y = viewport.max_y - viewport.delta_y * (rows + 0.5)
    return np.meshgrid(x, y)


def render_frame(viewport: Viewport, params: RenderParameters, *, device: Optional[str] = None) -> FrameResult:
    """Evaluate and color every pixel of ``viewport`` at once."""

    X, Y = pixel_grid(viewport)
    px = X.ravel()
    py = Y.ravel()
    if params.julia_constant is not None:
        cx = np.full_like(px, params.julia_constant.x)
        cy = np.full_like(py, params.julia_constant.y)
    else:
        cx, cy = px, py
    bailout = -1 if params.bailout is None else params.bailout

    with tf.device(device if device is not None else "/CPU:0"):
        counts, escaped = _escape_run(
            tf.convert_to_tensor(px, dtype=tf.float64),
            tf.convert_to_tensor(py, dtype=tf.float64),
            tf.convert_to_tensor(cx, dtype=tf.float64),
            tf.convert_to_tensor(cy, dtype=tf.float64),
            tf.constant(params.threshold, dtype=tf.float64),
            tf.constant(bailout, dtype=tf.int64),
        )

    iterations = counts.numpy().reshape(viewport.height, viewport.width)
    escaped_mask = escaped.numpy().reshape(viewport.height, viewport.width)
    buffer = map_colors(iterations.ravel(), escaped_mask.ravel())
    return FrameResult(iterations=iterations, escaped=escaped_mask, buffer=buffer, viewport=viewport)
