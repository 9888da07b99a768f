"""
Albers USA composite projection and SVG path generation.

This is the usual three-inset layout: an Albers equal-area conic for the
lower 48, a shrunken conic for Alaska and one for Hawaii, each placed at a
fixed offset next to the mainland and clipped to its own box. All insets are
defined at unit scale with the mainland centred on the origin; fitting to a
canvas is a single uniform scale plus translate on top of that.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from functools import cached_property

Point = tuple[float, float]
Box = tuple[Point, Point]

# Path coordinates are rounded to this many decimals.
PATH_DIGITS = 3


@dataclass(frozen=True)
class ConicEqualArea:
    """
    Albers equal-area conic, rotated about the pole then recentred.

    `parallels`, `rotate` (longitude shift) and `center` are in degrees;
    `center` is given in the rotated frame.
    """

    parallels: tuple[float, float]
    rotate: float
    center: Point

    @cached_property
    def _constants(self) -> tuple[float, float, float]:
        phi0, phi1 = (math.radians(p) for p in self.parallels)
        sy0 = math.sin(phi0)
        n = (sy0 + math.sin(phi1)) / 2.0
        c = 1.0 + sy0 * (2.0 * n - sy0)
        return n, c, math.sqrt(c) / n

    def raw(self, lam: float, phi: float) -> Point:
        n, c, r0 = self._constants
        # clamp against tiny negative values near the pole
        r = math.sqrt(max(0.0, c - 2.0 * n * math.sin(phi))) / n
        lam *= n
        return r * math.sin(lam), r0 - r * math.cos(lam)

    def unit(self, lon: float, lat: float) -> Point:
        """
        Project with scale 1 and the center on the origin, y pointing down.
        """
        lam = (lon + self.rotate + 180.0) % 360.0 - 180.0
        x, y = self.raw(math.radians(lam), math.radians(lat))
        cx, cy = self._center
        return x - cx, cy - y

    @cached_property
    def _center(self) -> Point:
        return self.raw(math.radians(self.center[0]), math.radians(self.center[1]))


@dataclass(frozen=True)
class Inset:
    projection: ConicEqualArea
    scale: float
    offset: Point
    clip: Box

    def project(self, lon: float, lat: float) -> Point | None:
        ux, uy = self.projection.unit(lon, lat)
        x = self.scale * ux + self.offset[0]
        y = self.scale * uy + self.offset[1]
        (x0, y0), (x1, y1) = self.clip
        if x0 <= x <= x1 and y0 <= y <= y1:
            return x, y
        return None


LOWER_48 = Inset(
    ConicEqualArea(parallels=(29.5, 45.5), rotate=96.0, center=(-0.6, 38.7)),
    scale=1.0,
    offset=(0.0, 0.0),
    clip=((-0.455, -0.238), (0.455, 0.238)),
)
ALASKA = Inset(
    ConicEqualArea(parallels=(55.0, 65.0), rotate=154.0, center=(-2.0, 58.5)),
    scale=0.35,
    offset=(-0.307, 0.201),
    clip=((-0.425, 0.120), (-0.214, 0.234)),
)
HAWAII = Inset(
    ConicEqualArea(parallels=(8.0, 18.0), rotate=157.0, center=(-3.0, 19.9)),
    scale=1.0,
    offset=(-0.205, 0.212),
    clip=((-0.214, 0.166), (-0.115, 0.234)),
)
ALBERS_USA_INSETS = (LOWER_48, ALASKA, HAWAII)


def albers_usa_unit(lon: float, lat: float) -> Point | None:
    # first inset whose clip box takes the point wins
    for inset in ALBERS_USA_INSETS:
        point = inset.project(lon, lat)
        if point is not None:
            return point
    return None


@dataclass(frozen=True)
class FittedProjection:
    scale: float = 1.0
    translate: Point = (0.0, 0.0)

    def __call__(self, lon: float, lat: float) -> Point | None:
        point = albers_usa_unit(lon, lat)
        if point is None:
            return None
        return self.scale * point[0] + self.translate[0], self.scale * point[1] + self.translate[1]


def _lines(geometry: dict | None) -> Iterator[list]:
    if not geometry:
        return
    kind = geometry.get("type")
    coords = geometry.get("coordinates") or []
    if kind == "LineString":
        yield coords
    elif kind in ("MultiLineString", "Polygon"):
        yield from coords
    elif kind == "MultiPolygon":
        for polygon in coords:
            yield from polygon
    elif kind == "GeometryCollection":
        for child in geometry.get("geometries") or []:
            yield from _lines(child)


def _coords(features: Iterable[dict]) -> Iterator[Point]:
    for feature in features:
        for line in _lines(feature.get("geometry")):
            for position in line:
                yield position[0], position[1]


def fit_extent(features: Iterable[dict], extent: Box) -> FittedProjection:
    """
    Scale and centre the composite so every projected vertex fits `extent`.
    """
    xs: list[float] = []
    ys: list[float] = []
    for lon, lat in _coords(features):
        point = albers_usa_unit(lon, lat)
        if point is not None:
            xs.append(point[0])
            ys.append(point[1])

    (ex0, ey0), (ex1, ey1) = extent
    width = ex1 - ex0
    height = ey1 - ey0
    if not xs:
        return FittedProjection(translate=(ex0 + width / 2.0, ey0 + height / 2.0))

    bx0, bx1 = min(xs), max(xs)
    by0, by1 = min(ys), max(ys)
    # a single point or a straight line has no extent along one axis
    scales = []
    if bx1 > bx0:
        scales.append(width / (bx1 - bx0))
    if by1 > by0:
        scales.append(height / (by1 - by0))
    k = min(scales) if scales else 1.0
    tx = ex0 + (width - k * (bx1 + bx0)) / 2.0
    ty = ey0 + (height - k * (by1 + by0)) / 2.0
    return FittedProjection(scale=k, translate=(tx, ty))


def _fmt(value: float) -> str:
    text = f"{value:.{PATH_DIGITS}f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def path_data(projection: FittedProjection, geometry: dict | None) -> str:
    """
    SVG path data for a geometry; empty when nothing lands inside an inset.

    Vertices that fall outside every inset end the current subpath.
    """
    parts: list[str] = []
    for line in _lines(geometry):
        pen_down = False
        for position in line:
            point = projection(position[0], position[1])
            if point is None:
                pen_down = False
                continue
            command = "L" if pen_down else "M"
            parts.append(f"{command}{_fmt(point[0])},{_fmt(point[1])}")
            pen_down = True
    return "".join(parts)
