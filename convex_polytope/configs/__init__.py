"""Configuration dataclasses."""

from .base_config import PolytopeConfig, DEFAULT_DIST_TOL

__all__ = [
    'PolytopeConfig',
    'DEFAULT_DIST_TOL',
]
