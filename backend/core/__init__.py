"""Core backend infrastructure for the match ratings backend.

This package contains configuration, logging, database, and dependency helpers
used by the FastAPI application factory.
"""
