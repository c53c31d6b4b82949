"""Typed, byte-packed data grids for machine learning: attributes, dense instances, views, sorting and CSV/ARFF loading."""

__version__ = "0.1.0"