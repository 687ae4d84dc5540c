"""Measure durations between start and end markers in application logs."""

__version__ = "0.1.0"
