"""
Graph coordinates
Points, sampling ranges and the visible window, plus the conversions
between world (graph) coordinates and screen pixels.
"""
import math
from dataclasses import dataclass, replace
from typing import NamedTuple

from .config import DEFAULT_X_RANGE, DEFAULT_Y_RANGE, FIT_PADDING, ZOOM_FACTOR


class Point2D(NamedTuple):
    x: float
    y: float


# ============================================================================
# SAMPLE RANGE
# ============================================================================

@dataclass(frozen=True)
class SampleRange:
    """A 1-D domain walk from ``min`` to ``max`` in steps of ``step``"""
    min: float
    max: float
    step: float

    def __post_init__(self):
        if not all(math.isfinite(v) for v in (self.min, self.max, self.step)):
            raise ValueError(f"Sample range must be finite: {self}")
        if self.step <= 0:
            raise ValueError(f"Sample step must be positive, got {self.step}")
        if self.min > self.max:
            raise ValueError(f"Sample range min {self.min} exceeds max {self.max}")

    @property
    def count(self):
        """Number of samples the walk produces"""
        # Tolerance keeps max itself when (max - min) / step is integral
        return int(math.floor((self.max - self.min) / self.step + 1e-9)) + 1

    def values(self):
        for i in range(self.count):
            yield self.min + i * self.step

    def throttled(self, max_samples):
        """Same span with a coarser step so at most ``max_samples`` are taken"""
        if self.count <= max_samples:
            return self
        span = self.max - self.min
        return replace(self, step=span / max(max_samples - 1, 1))


# ============================================================================
# VIEWPORT
# ============================================================================

@dataclass(frozen=True)
class Viewport:
    """Rectangular world-coordinate window"""
    x_min: float = DEFAULT_X_RANGE[0]
    x_max: float = DEFAULT_X_RANGE[1]
    y_min: float = DEFAULT_Y_RANGE[0]
    y_max: float = DEFAULT_Y_RANGE[1]
    zoom: float = 1.0

    def __post_init__(self):
        if not (self.x_max > self.x_min and self.y_max > self.y_min):
            raise ValueError(f"Viewport must have positive extent: {self}")

    @classmethod
    def default(cls):
        return cls()

    @property
    def width(self):
        return self.x_max - self.x_min

    @property
    def height(self):
        return self.y_max - self.y_min

    @property
    def center(self):
        return Point2D((self.x_min + self.x_max) / 2, (self.y_min + self.y_max) / 2)

    def _resized(self, factor, zoom):
        cx, cy = self.center
        half_w = self.width / factor / 2
        half_h = self.height / factor / 2
        return Viewport(cx - half_w, cx + half_w, cy - half_h, cy + half_h, zoom)

    def zoomed_in(self, factor=ZOOM_FACTOR):
        return self._resized(factor, self.zoom * factor)

    def zoomed_out(self, factor=ZOOM_FACTOR):
        return self._resized(1 / factor, self.zoom / factor)

    def panned_to(self, x, y):
        """Recenter on (x, y) keeping the size"""
        half_w, half_h = self.width / 2, self.height / 2
        return replace(self, x_min=x - half_w, x_max=x + half_w,
                       y_min=y - half_h, y_max=y + half_h)

    def fitted_to(self, points, padding=FIT_PADDING):
        """Window around ``points`` with ``padding`` of the span on each side"""
        points = list(points)
        if not points:
            return self
        min_x, max_x, min_y, max_y = calculate_bounds(points)
        x_pad = (max_x - min_x) * padding or 1.0
        y_pad = (max_y - min_y) * padding or 1.0
        return replace(self, x_min=min_x - x_pad, x_max=max_x + x_pad,
                       y_min=min_y - y_pad, y_max=max_y + y_pad)


# ============================================================================
# COORDINATE TRANSFORMS
# ============================================================================

def world_to_screen(point, viewport, canvas_width, canvas_height):
    """Convert graph coordinates to screen pixels (y grows downward)"""
    x, y = point[0], point[1]
    screen_x = (x - viewport.x_min) / viewport.width * canvas_width
    screen_y = (viewport.y_max - y) / viewport.height * canvas_height
    return Point2D(screen_x, screen_y)


def screen_to_world(point, viewport, canvas_width, canvas_height):
    """Convert screen pixels to graph coordinates"""
    sx, sy = point[0], point[1]
    x = viewport.x_min + sx / canvas_width * viewport.width
    y = viewport.y_max - sy / canvas_height * viewport.height
    return Point2D(x, y)


def is_point_visible(point, viewport):
    return (viewport.x_min <= point[0] <= viewport.x_max and
            viewport.y_min <= point[1] <= viewport.y_max)


def split_discontinuities(points, viewport, canvas_width, canvas_height):
    """
    Break a sampled curve into sub-paths.

    A new sub-path starts whenever two consecutive points are more than half
    the canvas height apart on screen, so vertical asymptotes (tan(x)) are not
    drawn as solid bars.
    """
    segments = []
    current = []
    last_screen_y = None
    threshold = canvas_height / 2

    for point in points:
        screen_y = world_to_screen(point, viewport, canvas_width, canvas_height).y
        if last_screen_y is not None and abs(screen_y - last_screen_y) > threshold:
            segments.append(tuple(current))
            current = []
        current.append(point)
        last_screen_y = screen_y

    if current:
        segments.append(tuple(current))
    return segments


def calculate_bounds(points):
    """(min_x, max_x, min_y, max_y) of the points; default window when empty"""
    if not points:
        return DEFAULT_X_RANGE + DEFAULT_Y_RANGE
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return min(xs), max(xs), min(ys), max(ys)


# ============================================================================
# AXIS TICKS
# ============================================================================

def calculate_tick_spacing(span, max_ticks=10):
    """Round tick spacing (1, 2 or 5 times a power of ten) for a positive span"""
    if not (math.isfinite(span) and span > 0):
        raise ValueError(f"Tick span must be positive and finite, got {span}")
    rough = span / max_ticks
    magnitude = 10 ** math.floor(math.log10(rough))
    normalized = rough / magnitude

    if normalized <= 1:
        spacing = 1
    elif normalized <= 2:
        spacing = 2
    elif normalized <= 5:
        spacing = 5
    else:
        spacing = 10
    return spacing * magnitude


def generate_ticks(min_value, max_value, spacing):
    ticks = []
    index = math.ceil(min_value / spacing)
    while index * spacing <= max_value + spacing * 1e-9:
        ticks.append(index * spacing)
        index += 1
    return ticks


def format_axis_label(value):
    if abs(value) < 1e-10:
        return "0"
    if abs(value) >= 1e6 or abs(value) < 1e-3:
        return f"{value:.1e}"
    return f"{round(value, 6):g}"
