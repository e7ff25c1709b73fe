"""Geographic bounding boxes."""
import math
from collections.abc import Mapping
from dataclasses import dataclass
from numbers import Real
from typing import Tuple

from .exceptions import ValidationError

_KEY_SETS = (
    ("west", "south", "east", "north"),
    ("left", "bottom", "right", "top"),
)


def _as_coordinate(name, value):
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ValidationError(
            f"bounding box {name} must be a number, got {value!r}", "bbox")
    value = float(value)
    if not math.isfinite(value):
        raise ValidationError(
            f"bounding box {name} must be finite, got {value!r}", "bbox")
    return value


@dataclass(frozen=True)
class BoundingBox:
    """Longitude/latitude bounding box in degrees.

    Parameters
    ----------
    west, south, east, north : float
        Box edges. ``west`` must be smaller than ``east`` and ``south``
        smaller than ``north``.

    Raises
    ------
    ValidationError
        If an edge is not a finite number or the edges are out of order.
    """

    west: float
    south: float
    east: float
    north: float

    def __post_init__(self):
        for name in ("west", "south", "east", "north"):
            object.__setattr__(self, name, _as_coordinate(name, getattr(self, name)))
        if not self.west < self.east:
            raise ValidationError(
                f"bounding box west ({self.west}) must be less than east ({self.east})",
                "bbox")
        if not self.south < self.north:
            raise ValidationError(
                f"bounding box south ({self.south}) must be less than north ({self.north})",
                "bbox")

    @classmethod
    def coerce(cls, value) -> "BoundingBox":
        """Build a bounding box from the usual ways of spelling one.

        Accepts a ``BoundingBox``, a sequence ``(west, south, east, north)``
        or a mapping keyed by ``west/south/east/north`` or
        ``left/bottom/right/top``.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            for keys in _KEY_SETS:
                if set(keys) == set(value):
                    return cls(*(value[k] for k in keys))
            raise ValidationError(
                f"bounding box keys must be one of {_KEY_SETS}, got {sorted(value)}",
                "bbox")
        if isinstance(value, (str, bytes)):
            raise ValidationError("bounding box must be four numbers", "bbox")
        try:
            items = list(value)
        except TypeError:
            raise ValidationError(
                f"bounding box must be four numbers, got {value!r}", "bbox") from None
        if len(items) != 4:
            raise ValidationError(
                f"bounding box must have exactly four values, got {len(items)}", "bbox")
        return cls(*items)

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.west, self.south, self.east, self.north)

    def corners(self) -> Tuple[Tuple[float, float], ...]:
        """The four corners as (lon, lat) pairs.

        Order is lower-left, upper-left, lower-right, upper-right.
        """
        return (
            (self.west, self.south),
            (self.west, self.north),
            (self.east, self.south),
            (self.east, self.north),
        )

    @property
    def center(self) -> Tuple[float, float]:
        return ((self.west + self.east) / 2, (self.south + self.north) / 2)


# Houston, TX. Default extent of the OSM export helper.
HOUSTON_BBOX = BoundingBox(-95.80204, 29.38048, -94.92313, 30.14344)
