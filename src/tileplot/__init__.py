"""tileplot: OpenStreetMap images as matplotlib map backgrounds.

Fetch a map image for a bounding box, then draw points, contours or
polygons on top of it::

    import tileplot

    raster = tileplot.get_openstreetmap(zoom=10, color="bw")
    m = tileplot.plot_map(raster, extent="device", legend="topleft")
    m.ax.scatter(lon, lat, label="crimes")
    m.legend()
"""
from .bbox import HOUSTON_BBOX, BoundingBox
from .config import FetcherConfig
from .exceptions import (DecodeError, DownloadError, FetchError,
                         OutOfRangeError, TilePlotError,
                         UnsupportedFormatError, ValidationError)
from .fetch import TileFetcher, get_openstreetmap
from .frame import FrameGeometry, compute_frame
from .georaster import GeoRaster
from .render import MapPlot, inset_raster, plot_map
from .scale_lookup import osm_scale_lookup

__all__ = [
    "BoundingBox", "HOUSTON_BBOX", "FetcherConfig", "GeoRaster",
    "TileFetcher", "get_openstreetmap", "osm_scale_lookup",
    "FrameGeometry", "compute_frame", "MapPlot", "inset_raster", "plot_map",
    "TilePlotError", "ValidationError", "OutOfRangeError",
    "UnsupportedFormatError", "FetchError", "DownloadError", "DecodeError",
]
