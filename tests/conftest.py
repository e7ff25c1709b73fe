"""Shared pytest fixtures for tileplot tests."""

import io
import tempfile
from pathlib import Path
from unittest.mock import MagicMock

import matplotlib
matplotlib.use('Agg')
import numpy as np
import pytest
from PIL import Image

from tileplot.bbox import BoundingBox
from tileplot.config import FetcherConfig
from tileplot.georaster import GeoRaster


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def houston_bbox():
    """The default Houston bounding box."""
    return BoundingBox(-95.80204, 29.38048, -94.92313, 30.14344)


@pytest.fixture
def rgb_pixels():
    """A small 4x6 RGB pixel grid with a pure red top-left pixel."""
    pixels = np.zeros((4, 6, 3), dtype=np.uint8)
    pixels[..., 1] = 128
    pixels[0, 0] = (255, 0, 0)
    pixels[-1, -1] = (255, 255, 255)
    return pixels


@pytest.fixture
def sample_raster(rgb_pixels, houston_bbox):
    """An RGB GeoRaster over Houston."""
    return GeoRaster(rgb_pixels, houston_bbox)


@pytest.fixture
def png_bytes(rgb_pixels):
    """PNG encoded bytes of ``rgb_pixels``."""
    buf = io.BytesIO()
    Image.fromarray(rgb_pixels).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def fetcher_config():
    """Config pointing at the OSM export endpoint without an API key."""
    return FetcherConfig(timeout=5.0, user_agent="tileplot-tests")


@pytest.fixture
def mock_session(png_bytes):
    """A requests.Session stand-in whose GET returns ``png_bytes``."""
    response = MagicMock()
    response.status_code = 200
    response.content = png_bytes
    response.raise_for_status.return_value = None
    session = MagicMock()
    session.get.return_value = response
    return session
