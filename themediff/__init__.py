"""
themediff - попиксельное сравнение снимков тем с эталонами и diff-триптихи
"""

__version__ = "1.0.0"

from .core.compare import compare, first_mismatch, IMAGE_THRESHOLD
from .core.render import render, DiffPalette, DEFAULT_PALETTE
from .core.raster import as_raster
from .core.io import safe_imread, safe_imwrite
from .task import ComparisonTask, run_comparisons

__all__ = [
    "compare",
    "first_mismatch",
    "IMAGE_THRESHOLD",
    "render",
    "DiffPalette",
    "DEFAULT_PALETTE",
    "as_raster",
    "safe_imread",
    "safe_imwrite",
    "ComparisonTask",
    "run_comparisons",
]
