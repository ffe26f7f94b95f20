"""Halfspace handling and the Qhull-backed hull oracle."""

from .halfspaces import (
    DegenerateConstraintError,
    as_halfspace_array,
    normalize_halfspaces,
    translate_halfspaces,
    signed_distances,
    empty_slab,
)
from .hull_oracle import HullData, build_hull, hull_area_and_volume

__all__ = [
    'DegenerateConstraintError',
    'as_halfspace_array',
    'normalize_halfspaces',
    'translate_halfspaces',
    'signed_distances',
    'empty_slab',
    'HullData',
    'build_hull',
    'hull_area_and_volume',
]
