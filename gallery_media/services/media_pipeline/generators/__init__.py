"""
Media Generation Components

- Transcoder: fit-inside resize + re-encode, the shared primitive
- ThumbnailGenerator: cover-fit, center-cropped thumbnails
- ResponsiveSetGenerator: concurrent width-bounded variants
- WebOptimizer: jpeg plus optional webp twin
"""

from .responsive_set_generator import ResponsiveSetGenerator
from .thumbnail_generator import ThumbnailGenerator
from .transcoder import Transcoder
from .web_optimizer import WebOptimizer

__all__ = [
    "Transcoder",
    "ThumbnailGenerator",
    "ResponsiveSetGenerator",
    "WebOptimizer",
]
