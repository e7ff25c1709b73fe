"""Georeferenced raster images.

A :class:`GeoRaster` is a pixel grid together with the bounding box it
covers. The grid is either RGB, shape ``(H, W, 3)``, or grayscale, shape
``(H, W)``, always ``uint8``.
"""
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .bbox import BoundingBox
from .exceptions import ValidationError

# Luminance weights in hundredths: 0.30 R + 0.59 G + 0.11 B
GRAY_WEIGHTS = (30, 59, 11)


def rgb_to_gray(pixels: np.ndarray) -> np.ndarray:
    """Convert an RGB grid to single channel luminance.

    Uses ``0.30 R + 0.59 G + 0.11 B`` rounded half up, computed in integer
    arithmetic so that e.g. pure red (255, 0, 0) maps to exactly 77.

    Parameters
    ----------
    pixels : numpy.ndarray
        Array of shape (H, W, 3) with values in 0..255.

    Returns
    -------
    numpy.ndarray
        uint8 array of shape (H, W).
    """
    pixels = np.asarray(pixels)
    if pixels.ndim != 3 or pixels.shape[2] != 3:
        raise ValidationError(
            f"expected an (H, W, 3) RGB array, got shape {pixels.shape}", "pixels")
    rgb = pixels.astype(np.int32)
    wr, wg, wb = GRAY_WEIGHTS
    gray = (wr * rgb[..., 0] + wg * rgb[..., 1] + wb * rgb[..., 2] + 50) // 100
    return gray.astype(np.uint8)


def _frozen(pixels):
    pixels = np.array(pixels, dtype=np.uint8, copy=True)
    pixels.setflags(write=False)
    return pixels


@dataclass(frozen=True, eq=False)
class GeoRaster:
    """Pixel grid plus the bounding box it was requested for.

    Parameters
    ----------
    pixels : numpy.ndarray
        Integer array with values in 0..255, (H, W, 3) for RGB or (H, W)
        for grayscale. A read-only uint8 copy is stored.
    bbox : BoundingBox
        Geographic extent of the image.
    """

    pixels: np.ndarray
    bbox: BoundingBox

    def __post_init__(self):
        pixels = np.asarray(self.pixels)
        if pixels.ndim == 3 and pixels.shape[2] == 4:
            pixels = pixels[..., :3]
        if not (pixels.ndim == 2 or (pixels.ndim == 3 and pixels.shape[2] == 3)):
            raise ValidationError(
                f"pixels must be (H, W) or (H, W, 3), got shape {pixels.shape}",
                "pixels")
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise ValidationError("pixels must not be empty", "pixels")
        if pixels.dtype.kind not in "ui":
            raise ValidationError(
                f"pixels must be integers in 0..255, got dtype {pixels.dtype}", "pixels")
        if pixels.dtype != np.uint8:
            if pixels.min() < 0 or pixels.max() > 255:
                raise ValidationError("pixel values must be within 0..255", "pixels")
        if not isinstance(self.bbox, BoundingBox):
            object.__setattr__(self, "bbox", BoundingBox.coerce(self.bbox))
        object.__setattr__(self, "pixels", _frozen(pixels))

    @property
    def is_grayscale(self) -> bool:
        return self.pixels.ndim == 2

    @property
    def shape(self) -> Tuple[int, int]:
        """(rows, columns) of the pixel grid."""
        return self.pixels.shape[:2]

    @property
    def extent(self) -> Tuple[float, float, float, float]:
        """(west, east, south, north), the order ``imshow`` expects."""
        b = self.bbox
        return (b.west, b.east, b.south, b.north)

    def to_grayscale(self) -> "GeoRaster":
        """Return a new grayscale raster over the same bounding box."""
        if self.is_grayscale:
            return self
        return GeoRaster(rgb_to_gray(self.pixels), self.bbox)

    def to_hex(self) -> np.ndarray:
        """Pixel colors as an (H, W) array of ``#RRGGBB`` strings."""
        if self.is_grayscale:
            rgb = np.repeat(self.pixels[..., np.newaxis], 3, axis=2)
        else:
            rgb = self.pixels
        flat = rgb.reshape(-1, 3)
        colors = np.array([f"#{r:02X}{g:02X}{b:02X}" for r, g, b in flat.tolist()])
        return colors.reshape(rgb.shape[:2])
