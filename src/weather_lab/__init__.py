"""Forecast and climate normals summaries served over HTTP and the CLI."""

__version__ = "0.1.0"
