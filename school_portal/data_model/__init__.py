"""Shared data model primitives."""

from school_portal.data_model.base import StrictBaseModel


__all__ = ["StrictBaseModel"]
