"""film-gallery: incremental, content-addressed photo albums on S3."""

__version__ = "0.1.0"
