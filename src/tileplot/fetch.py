"""OpenStreetMap export downloader.

Builds a request for the OSM ``cgi-bin/export`` endpoint from a bounding
box and scale, downloads the image and returns it as a
:class:`~tileplot.georaster.GeoRaster`.

Usage:
    fetcher = TileFetcher()
    url = fetcher.build_url(HOUSTON_BBOX, 606250)        # no request made
    raster = fetcher.fetch(HOUSTON_BBOX, 606250, color="bw")

If you get a ``DownloadError`` the scale is the usual suspect: pick one
with :func:`~tileplot.scale_lookup.osm_scale_lookup`, or open
https://www.openstreetmap.org/, navigate to the area, click "Export" and
copy the scale listed for "map image". The OSM servers are also
sometimes down (HTTP 503); ``urlonly=True`` gives a URL you can try in a
browser.
"""
import io
import logging
import math
import pathlib
from numbers import Integral, Real
from typing import Optional, Union
from urllib.parse import quote

import numpy as np
import requests
from PIL import Image

from .bbox import HOUSTON_BBOX, BoundingBox
from .config import FetcherConfig
from .exceptions import (DecodeError, DownloadError, UnsupportedFormatError,
                         ValidationError)
from .georaster import GeoRaster, rgb_to_gray
from .scale_lookup import osm_scale_lookup

log = logging.getLogger(__name__)

FORMATS = ("png", "jpeg", "svg", "pdf", "ps")
SUPPORTED_FORMATS = ("png",)
COLORS = ("color", "bw")
_COLOR_ALIASES = {"grayscale": "bw", "greyscale": "bw", "gray": "bw"}

# Left as-is when encoding, everything else is percent-escaped.
_URL_SAFE = "][!$&'()*+,;=:/?@#"


def _format_number(value) -> str:
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text


def normalize_color(color):
    color = _COLOR_ALIASES.get(color, color)
    if color not in COLORS:
        raise ValidationError(
            f"color must be one of {COLORS}, got {color!r}", "color")
    return color


def check_scale(scale) -> int:
    """Return ``scale`` as a positive int or raise ``ValidationError``."""
    if isinstance(scale, bool) or not isinstance(scale, Real):
        raise ValidationError("scale must be a positive integer.", "scale")
    if not isinstance(scale, Integral):
        if not math.isfinite(scale) or scale != round(scale):
            raise ValidationError("scale must be a positive integer.", "scale")
    scale = int(scale)
    if scale <= 0:
        raise ValidationError("scale must be a positive integer.", "scale")
    return scale


def check_format(fmt):
    if fmt not in FORMATS:
        raise UnsupportedFormatError(
            f"unknown format {fmt!r}, expected one of {FORMATS}", "format")
    if fmt not in SUPPORTED_FORMATS:
        raise UnsupportedFormatError(
            f"format {fmt!r} is not supported, currently only the png format is supported.",
            "format")
    return fmt


def check_args(bbox, scale, fmt="png", color="color") -> Optional[ValidationError]:
    """Check fetch arguments without touching the network.

    Returns
    -------
    ValidationError or None
        The first problem found, or None when every argument is fine.
    """
    try:
        BoundingBox.coerce(bbox)
        check_scale(scale)
        check_format(fmt)
        normalize_color(color)
    except ValidationError as err:
        return err
    return None


def decode_png(data: bytes) -> np.ndarray:
    """Decode PNG bytes into an (H, W, 3) uint8 RGB array.

    Raises
    ------
    DecodeError
        If the bytes are empty, not an image, or an image that is not a PNG.
    """
    if not data:
        raise DecodeError("map grabbing failed - the server returned an empty body.")
    try:
        with Image.open(io.BytesIO(data)) as img:
            if img.format != "PNG":
                raise DecodeError(
                    f"map grabbing failed - expected a PNG image, got {img.format}.")
            img.load()
            pixels = np.asarray(img.convert("RGB"), dtype=np.uint8)
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as exc:
        raise DecodeError(
            "map grabbing failed - the response is not a readable image.") from exc
    return pixels


class TileFetcher:
    """Download map images from an OSM style export endpoint.

    Params:
        config: provider settings; built from ``tileplot.config.settings``
            when omitted
        session: optional requests.Session for connection reuse
    """

    def __init__(self, config: Optional[FetcherConfig] = None,
                 session: Optional[requests.Session] = None):
        self.config = config if config is not None else FetcherConfig.from_settings()
        self.session = session or requests.Session()

    check_args = staticmethod(check_args)

    def build_url(self, bbox, scale, fmt: str = "png") -> str:
        """Construct the export URL (no request performed).

        Returns:
            Percent-encoded URL of the form
            ``<base_url>bbox=w,s,e,n&scale=<int>&format=<fmt>``.
        """
        check_format(fmt)
        bbox = BoundingBox.coerce(bbox)
        scale = check_scale(scale)

        segments = [
            "bbox=" + ",".join(_format_number(v) for v in bbox.as_tuple()),
            f"scale={scale}",
            f"format={fmt}",
        ]
        url = quote(self.config.base_url + "&".join(segments), safe=_URL_SAFE)
        if self.config.api_key:
            # the key is opaque, its reserved characters must not reach the query
            url += "&key=" + quote(self.config.api_key, safe="")
        return url

    def download(self, url: str) -> bytes:
        """Single GET, no retries. Failures raise ``DownloadError``."""
        headers = {"User-Agent": self.config.user_agent}
        log.debug("GET %s (timeout %ss)", url, self.config.timeout)
        try:
            r = self.session.get(url, timeout=self.config.timeout, headers=headers)
            r.raise_for_status()
        except requests.RequestException as exc:
            raise DownloadError(
                f"map grabbing failed - could not download {url}: {exc}") from exc
        if not 200 <= r.status_code < 300:
            raise DownloadError(
                f"map grabbing failed - HTTP status {r.status_code} for {url}")
        return r.content

    def fetch(self, bbox, scale, fmt: str = "png", color: str = "color",
              filename: Optional[Union[str, pathlib.Path]] = None,
              urlonly: bool = False) -> Union[GeoRaster, str]:
        """Fetch a map image for ``bbox`` at ``scale``.

        Params:
            bbox: (west, south, east, north) or a BoundingBox
            scale: OSM scale denominator, see ``osm_scale_lookup``
            fmt: image format, only "png" is supported
            color: "color" or "bw"
            filename: when given, the response is saved to
                ``<filename>.<fmt>`` and read back from there
            urlonly: return the URL instead of downloading

        Returns:
            GeoRaster whose bbox is the requested one, or the URL when
            ``urlonly`` is set.
        """
        err = check_args(bbox, scale, fmt, color)
        if err is not None:
            raise err
        bbox = BoundingBox.coerce(bbox)
        color = normalize_color(color)

        url = self.build_url(bbox, scale, fmt)
        if urlonly:
            return url

        data = self.download(url)
        if filename is not None:
            destfile = pathlib.Path(f"{filename}.{fmt}")
            try:
                destfile.write_bytes(data)
                log.debug("Saved %d bytes to %s", len(data), destfile)
                data = destfile.read_bytes()
            except OSError as exc:
                raise DownloadError(
                    f"map grabbing failed - could not save to {destfile}: {exc}") from exc

        pixels = decode_png(data)
        if color == "bw":
            pixels = rgb_to_gray(pixels)
        return GeoRaster(pixels, bbox)


def get_openstreetmap(bbox=HOUSTON_BBOX, scale=606250, fmt="png", color="color",
                      urlonly=False, filename=None, zoom=None, config=None,
                      session=None):
    """Get an OpenStreetMap image as a GeoRaster.

    Parameters
    ----------
    bbox : BoundingBox or sequence of float, optional
        (west, south, east, north), by default Houston, TX.
    scale : int, optional
        OSM scale denominator, by default 606250. Smaller scales give more
        detail. Ignored when ``zoom`` is given.
    fmt : str, optional
        Image format, only "png" is supported.
    color : {"color", "bw"}, optional
        Color or black-and-white (grayscale) image.
    urlonly : bool, optional
        Return the URL only.
    filename : str or pathlib.Path, optional
        Destination for the download, the format is added as extension.
    zoom : int, optional
        Zoom level 2-20, translated with ``osm_scale_lookup``.
    config : FetcherConfig, optional
        Provider settings.
    session : requests.Session, optional
        Session to send the request with.

    Returns
    -------
    GeoRaster or str
    """
    if zoom is not None:
        scale = osm_scale_lookup(zoom)
    fetcher = TileFetcher(config=config, session=session)
    return fetcher.fetch(bbox, scale, fmt=fmt, color=color,
                         filename=filename, urlonly=urlonly)
