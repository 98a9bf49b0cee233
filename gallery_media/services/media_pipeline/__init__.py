"""
Media Pipeline Package

Turns a raw upload into stored variants plus a persisted ImageAsset.

Components:
- ImageValidator: pre-flight size/dimension/format checks
- Transcoder, ThumbnailGenerator, ResponsiveSetGenerator, WebOptimizer
- IngestionPipeline: orchestration with compensating cleanup

Usage:
    pipeline = create_ingestion_pipeline(settings)
    asset = pipeline.ingest(upload, {"title": "Open day", "alt": "Visitors at the door"})
"""

from .generators import (
    ResponsiveSetGenerator,
    ThumbnailGenerator,
    Transcoder,
    WebOptimizer,
)
from .media_pipeline import IngestionPipeline, create_ingestion_pipeline
from .utils import (
    calculate_compression_ratio,
    extract_metadata,
    format_file_size,
)
from .validators import ImageValidator

__all__ = [
    "IngestionPipeline",
    "create_ingestion_pipeline",
    "ImageValidator",
    "Transcoder",
    "ThumbnailGenerator",
    "ResponsiveSetGenerator",
    "WebOptimizer",
    "calculate_compression_ratio",
    "extract_metadata",
    "format_file_size",
]
