"""Packaged static model catalog."""

from .static_models import get_static_models, load_catalog, resolve_catalog_name

__all__ = ["get_static_models", "load_catalog", "resolve_catalog_name"]
