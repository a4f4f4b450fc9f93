"""Resolve a human-readable bed name to a registered bed."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .exceptions import NotFoundError, ValidationError
from .models import BedDescriptor

_LOGGER = logging.getLogger(__name__)


def find_bed(beds: Iterable[BedDescriptor], name: str) -> BedDescriptor | None:
    """Return the first bed whose name matches exactly (case-sensitive), or None."""
    for index, bed in enumerate(beds):
        if bed.name == name:
            _LOGGER.debug("Identified bed %s at index %d", name, index)
            return bed
    return None


def resolve_bed(beds: Iterable[BedDescriptor], name: str) -> BedDescriptor:
    """Return the bed named ``name``.

    Duplicate names are not deduplicated; the first one in list order wins.

    Raises:
        ValidationError: ``name`` is empty.
        NotFoundError: No bed has that name.
    """
    if not name:
        raise ValidationError("must specify bed-name parameter")

    bed = find_bed(beds, name)
    if bed is None:
        raise NotFoundError(name)
    return bed
