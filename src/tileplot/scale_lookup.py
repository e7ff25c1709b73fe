"""Zoom level to OpenStreetMap scale denominator lookup.

The OSM export endpoint does not understand slippy-map zoom levels, it
takes a scale denominator instead. The values below were tuned by hand
against the export service, one map per zoom level, and are not derived
from any formula.

See https://wiki.openstreetmap.org/wiki/FAQ for background.
"""
import math
from numbers import Integral, Real
from types import MappingProxyType

from .exceptions import OutOfRangeError

MIN_ZOOM = 2
MAX_ZOOM = 20

OSM_SCALES = MappingProxyType({
    2: 175000000,
    3: 47500000,
    4: 32500000,
    5: 15000000,
    6: 10000000,
    7: 5000000,
    8: 2800000,
    9: 1200000,
    10: 575000,
    11: 220000,
    12: 110000,
    13: 70000,
    14: 31000,
    15: 15000,
    16: 7500,
    17: 4000,
    18: 2500,
    19: 1750,
    20: 1000,
})


def osm_scale_lookup(zoom=10):
    """Look up the OpenStreetMap scale for a given zoom level.

    Parameters
    ----------
    zoom : int, optional
        Zoom level between 2 and 20, by default 10.

    Returns
    -------
    int
        Scale denominator for the OSM export endpoint.

    Raises
    ------
    OutOfRangeError
        If ``zoom`` is not an integer in [2, 20].
    """
    if isinstance(zoom, bool) or not isinstance(zoom, Real):
        raise OutOfRangeError(f"zoom must be an integer, got {zoom!r}", "zoom")
    if not isinstance(zoom, Integral):
        if not math.isfinite(zoom) or zoom != int(zoom):
            raise OutOfRangeError(f"zoom must be an integer, got {zoom!r}", "zoom")
        zoom = int(zoom)
    try:
        return OSM_SCALES[int(zoom)]
    except KeyError:
        raise OutOfRangeError(
            f"zoom must be between {MIN_ZOOM} and {MAX_ZOOM}, got {zoom}",
            "zoom") from None


resolve = osm_scale_lookup
