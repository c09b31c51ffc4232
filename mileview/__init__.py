"""mileview: GitHub milestone overview dashboard."""

__version__ = "0.1.0"
