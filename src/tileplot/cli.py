"""Command-line interface for tileplot.

Look up OSM scales, build export URLs, download map images and render
them as matplotlib backgrounds, using the Typer framework.
"""
import logging
import pathlib
from typing import Optional

import typer

from . import config
from .exceptions import TilePlotError
from .fetch import TileFetcher
from .scale_lookup import osm_scale_lookup

app = typer.Typer(help="Fetch OpenStreetMap images and plot them as map backgrounds.")


@app.callback()
def main(
    env: str = typer.Option("DEFAULT", help="Dynaconf environment to use."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug messages."),
):
    """Fetch OpenStreetMap export images and plot them under matplotlib figures."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)
    if env != "DEFAULT":
        config.change_env(env)


def _scale(scale, zoom):
    if zoom is not None:
        return osm_scale_lookup(zoom)
    if scale is None:
        raise typer.BadParameter("give either --scale or --zoom")
    return scale


def _parse_bbox(text):
    try:
        return [float(v) for v in text.split(",")]
    except ValueError:
        raise typer.BadParameter(
            f"expected four comma separated numbers, got {text!r}", param_hint="--bbox")


def _fail(err):
    typer.echo(f"Error: {err}", err=True)
    raise typer.Exit(code=1)


@app.command()
def scale(zoom: int = typer.Argument(..., help="Zoom level, 2 to 20.")):
    """Print the OSM scale denominator for a zoom level."""
    try:
        typer.echo(osm_scale_lookup(zoom))
    except TilePlotError as err:
        _fail(err)


@app.command()
def url(
    bbox: str = typer.Option(..., help="west,south,east,north in degrees."),
    scale: Optional[int] = typer.Option(None, help="OSM scale denominator."),
    zoom: Optional[int] = typer.Option(None, help="Zoom level, overrides --scale."),
    fmt: str = typer.Option("png", "--format", help="Image format."),
):
    """Print the export URL for a bounding box without downloading."""
    try:
        fetcher = TileFetcher(config.FetcherConfig.from_settings())
        typer.echo(fetcher.fetch(_parse_bbox(bbox), _scale(scale, zoom),
                                 fmt=fmt, urlonly=True))
    except TilePlotError as err:
        _fail(err)


@app.command()
def fetch(
    bbox: str = typer.Option(..., help="west,south,east,north in degrees."),
    output: pathlib.Path = typer.Option(..., "--output", "-o", help="PNG file to write."),
    scale: Optional[int] = typer.Option(None, help="OSM scale denominator."),
    zoom: Optional[int] = typer.Option(None, help="Zoom level, overrides --scale."),
    color: str = typer.Option("color", help="color or bw."),
):
    """Download a map image and save it as PNG."""
    from PIL import Image

    try:
        fetcher = TileFetcher(config.FetcherConfig.from_settings())
        raster = fetcher.fetch(_parse_bbox(bbox), _scale(scale, zoom),
                               color=color)
    except TilePlotError as err:
        _fail(err)
    try:
        Image.fromarray(raster.pixels).save(output, format="PNG")
    except OSError as err:
        _fail(err)
    typer.echo(f"Wrote {raster.shape[1]}x{raster.shape[0]} map to {output}")


@app.command()
def plot(
    bbox: str = typer.Option(..., help="west,south,east,north in degrees."),
    output: pathlib.Path = typer.Option(..., "--output", "-o", help="Figure file to write."),
    scale: Optional[int] = typer.Option(None, help="OSM scale denominator."),
    zoom: Optional[int] = typer.Option(None, help="Zoom level, overrides --scale."),
    color: str = typer.Option("color", help="color or bw."),
    extent: str = typer.Option("panel", help="normal, panel or device."),
    darken: float = typer.Option(0.0, help="Darkening intensity between 0 and 1."),
    dpi: int = typer.Option(150, help="Figure resolution."),
):
    """Render a map background with matplotlib and save the figure."""
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    from .render import plot_map

    try:
        fetcher = TileFetcher(config.FetcherConfig.from_settings())
        raster = fetcher.fetch(_parse_bbox(bbox), _scale(scale, zoom),
                               color=color)
        m = plot_map(raster, extent=extent, darken=darken)
    except TilePlotError as err:
        _fail(err)
    try:
        m.figure.savefig(output, dpi=dpi)
    except OSError as err:
        _fail(err)
    finally:
        plt.close(m.figure)
    typer.echo(f"Wrote figure to {output}")


if __name__ == "__main__":
    app()
