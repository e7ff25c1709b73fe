"""Frame geometry for drawing a GeoRaster as a plot background.

Nothing here draws. :func:`compute_frame` turns a raster's bounding box and
the user's layout choices into plain data (corners, axis limits, legend
anchor, darken rectangle) that :mod:`tileplot.render` hands to matplotlib.

Longitude and latitude are treated as a locally flat plotting coordinate
system; there is no reprojection.
"""
import warnings
from dataclasses import dataclass
from numbers import Real
from typing import Optional, Tuple

from .bbox import BoundingBox
from .exceptions import ValidationError

EXTENTS = ("normal", "panel", "device")
_EXTENT_ALIASES = {"unconstrained": "normal"}

EDGE_LEGENDS = ("right", "left", "bottom", "top")
CORNER_LEGENDS = ("bottomleft", "bottomright", "topleft", "topright")
LEGENDS = EDGE_LEGENDS + CORNER_LEGENDS + ("none",)

# (x, y) justification of each corner, 0 = left/bottom, 1 = right/top
_CORNER_JUSTIFICATION = {
    "bottomleft": (0, 0),
    "topleft": (0, 1),
    "bottomright": (1, 0),
    "topright": (1, 1),
}

DEFAULT_DARKEN_COLOR = "black"


@dataclass(frozen=True)
class LegendPlacement:
    """Where the legend goes.

    ``offset`` and ``justification`` are set for corner positions only.
    ``offset`` is in axes fraction coordinates and is where the
    ``justification`` corner of the legend box is pinned.
    """

    position: str
    offset: Optional[Tuple[float, float]] = None
    justification: Optional[Tuple[int, int]] = None

    @property
    def is_corner(self) -> bool:
        return self.offset is not None


@dataclass(frozen=True)
class DarkenOverlay:
    """Semi-transparent rectangle over the whole map."""

    intensity: float
    color: str
    bbox: BoundingBox

    @property
    def visible(self) -> bool:
        return self.intensity > 0


@dataclass(frozen=True)
class FrameGeometry:
    corners: Tuple[Tuple[float, float], ...]
    extent: str
    xlim: Optional[Tuple[float, float]]
    ylim: Optional[Tuple[float, float]]
    show_chrome: bool
    legend: LegendPlacement
    darken: DarkenOverlay


def resolve_extent(extent="panel", fullpage=None, expand=None):
    """Translate the deprecated ``fullpage``/``expand`` flags into an extent.

    ``fullpage=True`` means "device"; otherwise ``expand=True`` means
    "panel" and ``expand=False`` means "normal". Passing either flag emits a
    ``DeprecationWarning`` and overrides ``extent``.
    """
    if fullpage is not None or expand is not None:
        warnings.warn("fullpage and expand syntaxes deprecated, use extent.",
                      DeprecationWarning, stacklevel=2)
        fullpage = bool(fullpage)
        expand = bool(expand)
        if fullpage:
            extent = "device"
        elif expand:
            extent = "panel"
        else:
            extent = "normal"
    extent = _EXTENT_ALIASES.get(extent, extent)
    if extent not in EXTENTS:
        raise ValidationError(
            f"extent must be one of {EXTENTS}, got {extent!r}", "extent")
    return extent


def _check_fraction(name, value):
    if isinstance(value, bool) or not isinstance(value, Real) or not 0 <= value <= 1:
        raise ValidationError(
            f"{name} must be a number between 0 and 1, got {value!r}", name)
    return float(value)


def legend_placement(legend="right", padding=0.02) -> LegendPlacement:
    """Compute legend anchor and justification.

    Corner positions are pinned ``padding`` away from the matching corner of
    the axes; edge positions and "none" are left to matplotlib.

    Examples
    --------
    >>> legend_placement("topleft", 0.02).offset
    (0.02, 0.98)
    """
    if legend not in LEGENDS:
        raise ValidationError(
            f"legend must be one of {LEGENDS}, got {legend!r}", "legend")
    padding = _check_fraction("padding", padding)
    if legend not in CORNER_LEGENDS:
        return LegendPlacement(legend)

    jx, jy = _CORNER_JUSTIFICATION[legend]
    x = 1 - padding if jx else padding
    y = 1 - padding if jy else padding
    return LegendPlacement(legend, offset=(x, y), justification=(jx, jy))


def darken_overlay(bbox, darken=0) -> DarkenOverlay:
    """Build the darken rectangle from a number or an (intensity, color) pair.

    0 is no darkening, 1 is a black-out.
    """
    if isinstance(darken, (tuple, list)):
        if len(darken) != 2:
            raise ValidationError(
                f"darken must be a number or (number, color), got {darken!r}", "darken")
        intensity, color = darken
    else:
        intensity, color = darken, DEFAULT_DARKEN_COLOR
    if isinstance(intensity, str):
        try:
            intensity = float(intensity)
        except ValueError:
            raise ValidationError(
                f"darken intensity must be a number, got {intensity!r}", "darken") from None
    intensity = _check_fraction("darken", intensity)
    if not isinstance(color, str) or not color:
        raise ValidationError(f"darken color must be a color name, got {color!r}", "darken")
    return DarkenOverlay(intensity, color, BoundingBox.coerce(bbox))


def compute_frame(raster, extent="panel", legend="right", padding=0.02,
                  darken=0, maprange=False) -> FrameGeometry:
    """Compute everything needed to draw ``raster`` as a map background.

    Parameters
    ----------
    raster : GeoRaster
        The map image; only its bounding box is used.
    extent : {"normal", "panel", "device"}, optional
        "normal" leaves the axis limits alone, "panel" clamps them to the
        bounding box, "device" also hides axes, ticks and background so the
        map fills the figure. By default "panel".
    legend : str, optional
        One of "right", "left", "bottom", "top", "bottomleft",
        "bottomright", "topleft", "topright", "none", by default "right".
    padding : float, optional
        Distance from a corner legend to the corner of the plot, as a
        fraction of the axes, by default 0.02.
    darken : float or (float, str), optional
        Darkening intensity in [0, 1] and optional color, by default 0.
    maprange : bool, optional
        With extent "normal", still set the limits to the bounding box.

    Returns
    -------
    FrameGeometry
    """
    extent = resolve_extent(extent)
    bbox = raster.bbox
    placement = legend_placement(legend, padding)
    overlay = darken_overlay(bbox, darken)

    limits = (extent != "normal") or bool(maprange)
    return FrameGeometry(
        corners=bbox.corners(),
        extent=extent,
        xlim=(bbox.west, bbox.east) if limits else None,
        ylim=(bbox.south, bbox.north) if limits else None,
        show_chrome=extent != "device",
        legend=placement,
        darken=overlay,
    )
