"""Draw GeoRasters as matplotlib map backgrounds.

Usage:
    raster = get_openstreetmap(zoom=10)
    m = plot_map(raster, extent="device", legend="topleft", darken=0.4)
    m.ax.scatter(lons, lats, c="red", label="stations")
    m.legend()
"""
import math
import warnings
from dataclasses import dataclass

import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.patches import Rectangle

from .frame import FrameGeometry, compute_frame, resolve_extent

# matplotlib loc strings for (x, y) justification corners
_CORNER_LOC = {
    (0, 0): "lower left",
    (0, 1): "upper left",
    (1, 0): "lower right",
    (1, 1): "upper right",
}

# loc and anchor placing the legend just outside each edge of the axes
_EDGE_LOC = {
    "right": ("center left", (1.02, 0.5)),
    "left": ("center right", (-0.02, 0.5)),
    "top": ("lower center", (0.5, 1.02)),
    "bottom": ("upper center", (0.5, -0.02)),
}


def inset_raster(ax, raster, xmin, xmax, ymin, ymax, **kwargs):
    """Draw ``raster`` into the data rectangle [xmin, xmax] x [ymin, ymax].

    Grayscale rasters are drawn with the ``gray`` colormap over 0..255.
    Extra keyword arguments go to ``Axes.imshow``.

    Returns
    -------
    matplotlib.image.AxesImage
    """
    opts = dict(origin="upper", interpolation="nearest", zorder=0)
    if raster.is_grayscale:
        opts.update(cmap="gray", vmin=0, vmax=255)
    opts.update(kwargs)
    return ax.imshow(raster.pixels, extent=(xmin, xmax, ymin, ymax), **opts)


def map_aspect(frame: FrameGeometry) -> float:
    """Aspect ratio that makes a degree of latitude and longitude the
    same length at the middle of the map."""
    lats = [lat for _, lat in frame.corners]
    mid = math.radians((min(lats) + max(lats)) / 2)
    return 1 / max(math.cos(mid), 1e-6)


@dataclass
class MapPlot:
    """Axes holding a map background and the frame it was drawn with."""

    ax: Axes
    frame: FrameGeometry

    @property
    def figure(self):
        return self.ax.figure

    def legend(self, **kwargs):
        """Place the axes legend according to the frame.

        Returns the legend, or None for ``legend="none"``.
        """
        placement = self.frame.legend
        if placement.position == "none":
            old = self.ax.get_legend()
            if old is not None:
                old.remove()
            return None
        if placement.is_corner:
            opts = dict(
                loc=_CORNER_LOC[placement.justification],
                bbox_to_anchor=placement.offset,
                bbox_transform=self.ax.transAxes,
                borderaxespad=0,
                frameon=True,
            )
            leg = self.ax.legend(**{**opts, **kwargs})
            frame = leg.get_frame()
            frame.set_facecolor("white")
            frame.set_edgecolor("0.8")
            frame.set_linewidth(0.2)
            return leg
        loc, anchor = _EDGE_LOC[placement.position]
        opts = dict(loc=loc, bbox_to_anchor=anchor, bbox_transform=self.ax.transAxes,
                    borderaxespad=0)
        return self.ax.legend(**{**opts, **kwargs})


def plot_map(raster, extent="panel", legend="right", padding=0.02, darken=0,
             maprange=False, ax=None, b=None, fullpage=None, expand=None):
    """Plot a GeoRaster as a map background.

    Parameters
    ----------
    raster : GeoRaster
        Map image, e.g. from ``get_openstreetmap``.
    extent : {"normal", "panel", "device"}, optional
        How much of the plot the map takes up, by default "panel".
    legend : str, optional
        Legend position used by ``MapPlot.legend``, by default "right".
    padding : float, optional
        Distance from a corner legend to the corner of the plot.
    darken : float or (float, str), optional
        Darkening of the map, e.g. ``0.5`` or ``(0.5, "white")``.
    maprange : bool, optional
        Set the limits to the map even with extent "normal".
    ax : matplotlib.axes.Axes, optional
        Axes to draw on, a new figure is created when omitted. With
        extent "device" only a new figure's axes fill the whole figure.
    b : float, optional
        Deprecated, renamed to ``padding``.
    fullpage, expand : bool, optional
        Deprecated, use ``extent``.

    Returns
    -------
    MapPlot
    """
    if b is not None:
        warnings.warn("b syntax deprecated, use padding.", DeprecationWarning,
                      stacklevel=2)
        padding = b
    if fullpage is not None or expand is not None:
        extent = resolve_extent(extent, fullpage=fullpage, expand=expand)

    frame = compute_frame(raster, extent=extent, legend=legend, padding=padding,
                          darken=darken, maprange=maprange)
    own_figure = ax is None
    if own_figure:
        _, ax = plt.subplots()

    bb = raster.bbox
    inset_raster(ax, raster, bb.west, bb.east, bb.south, bb.north)
    if frame.darken.visible:
        ax.add_patch(Rectangle(
            (bb.west, bb.south), bb.east - bb.west, bb.north - bb.south,
            facecolor=frame.darken.color, alpha=frame.darken.intensity,
            edgecolor="none", zorder=0.5))

    if frame.xlim is not None:
        ax.set_xlim(*frame.xlim)
        ax.set_ylim(*frame.ylim)
        ax.margins(0)
    ax.set_aspect(map_aspect(frame))

    if not frame.show_chrome:
        ax.set_axis_off()
        if own_figure:
            ax.set_position([0, 0, 1, 1])
    else:
        ax.set_xlabel("lon")
        ax.set_ylabel("lat")
    return MapPlot(ax, frame)
