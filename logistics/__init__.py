"""Multi-carrier logistics quote aggregation service."""

__version__ = "1.0.0"
