"""Shared helpers: the UNDEFINED marker, build-time assertions, coercion, logging."""

from .common import UNDEFINED, assert_, is_absent, is_empty, reach
from .coercion import Coerced

__all__ = ["UNDEFINED", "assert_", "is_absent", "is_empty", "reach", "Coerced"]
