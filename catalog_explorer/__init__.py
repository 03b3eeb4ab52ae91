"""Catalog Explorer.

Browses a remote product catalog (brands, series, models, products and
variants) and serves searchable, linked listing and detail page views.

This package provides:
- An async client for the remote catalog REST API
- An in-memory index builder, relational join engine and text search
- Page services driven by an explicit page state machine
- A FastAPI surface exposing the page views as JSON
"""

__version__ = "0.1.0"
