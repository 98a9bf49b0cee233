"""
Gallery media ingestion pipeline.

Validates uploaded images, derives web variants, stores them in an object
store and records them as gallery image assets.
"""

__version__ = "0.1.0"
