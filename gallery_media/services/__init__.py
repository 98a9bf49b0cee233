"""Service layer: logging and the media ingestion pipeline."""
