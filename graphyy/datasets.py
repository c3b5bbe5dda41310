"""
Datasets
Data points plus CSV import/export and generated sample data.
"""
import csv
import io
import logging
import math
from typing import NamedTuple, Optional

logger = logging.getLogger(__name__)

CSV_HEADER = ("x", "y", "label")


class DataPoint(NamedTuple):
    x: float
    y: float
    label: Optional[str] = None


def _to_float(text):
    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_csv(text):
    """
    Read ``x,y[,label]`` rows; the first row is a header and is skipped.

    Rows with fewer than two fields or a non-numeric x or y are dropped.
    """
    points = []
    skipped = 0
    reader = csv.reader(io.StringIO((text or "").strip()))
    for index, row in enumerate(reader):
        if index == 0:
            continue
        fields = [field.strip() for field in row]
        if len(fields) < 2:
            skipped += 1
            continue
        x, y = _to_float(fields[0]), _to_float(fields[1])
        if x is None or y is None:
            skipped += 1
            continue
        label = fields[2] if len(fields) > 2 and fields[2] else None
        points.append(DataPoint(x, y, label))

    if skipped:
        logger.info("Skipped %d unreadable CSV rows", skipped)
    return points


def export_csv(points):
    """CSV text with an ``x,y,label`` header"""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for point in points:
        label = point[2] if len(point) > 2 else None
        writer.writerow([repr(float(point[0])), repr(float(point[1])), label or ""])
    return buffer.getvalue()


def generate_normal_distribution(mean, std_dev, num_points=100, x_range=None):
    """Samples of the Gaussian pdf over ``x_range`` (default mean +/- 4 sigma)"""
    if std_dev <= 0:
        raise ValueError(f"Standard deviation must be positive, got {std_dev}")
    if num_points < 2:
        raise ValueError(f"Need at least 2 points, got {num_points}")

    low, high = x_range or (mean - 4 * std_dev, mean + 4 * std_dev)
    step = (high - low) / (num_points - 1)
    scale = 1 / (std_dev * math.sqrt(2 * math.pi))

    points = []
    for i in range(num_points):
        x = low + i * step
        y = scale * math.exp(-0.5 * ((x - mean) / std_dev) ** 2)
        points.append(DataPoint(x, y))
    return points
