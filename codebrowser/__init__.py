"""Aggregate static-analysis reports into annotated source views."""

__version__ = "1.0.0"
