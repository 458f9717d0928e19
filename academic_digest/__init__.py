"""Weekly academic research digests: ingest, denoise, compose, validate."""

__version__ = "0.1.0"
