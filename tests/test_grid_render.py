"""Tests for the transmission grid SVG renderer."""

import http.client
import io
import json
import math
import urllib.error
import urllib.parse

import pytest
from click.testing import CliRunner

from grid_render import cli
from grid_render.fetch import FetchError, fetch_all_transmission_lines, query_url
from grid_render.projection import ALASKA, HAWAII, LOWER_48, albers_usa_unit, fit_extent, path_data
from grid_render.svg import feature_path_markup, render_svg
from grid_render.voltage import annotate_rank, stroke_color, stroke_width, voltage_rank


def line_feature(coords, volt_class="345"):
    return {
        "type": "Feature",
        "properties": {"VOLT_CLASS": volt_class},
        "geometry": {"type": "LineString", "coordinates": coords},
    }


class FakeResponse(io.BytesIO):
    pass


class TruncatedResponse(FakeResponse):
    def read(self, *args):
        raise http.client.IncompleteRead(b'{"features": [', 5000)

    @classmethod
    def opener(cls, url, timeout=None):
        return cls()


class FakeServer:
    """Serves canned pages keyed by resultOffset and records requested URLs."""

    def __init__(self, pages):
        self.pages = pages
        self.urls = []

    def __call__(self, url, timeout=None):
        self.urls.append(url)
        query = urllib.parse.parse_qs(urllib.parse.urlparse(url).query)
        offset = int(query["resultOffset"][0])
        features = self.pages.get(offset, [])
        return FakeResponse(json.dumps({"type": "FeatureCollection", "features": features}).encode())


class TestVoltage:
    @pytest.mark.parametrize(
        "volt_class, rank",
        [
            ("UNDER 100", 1),
            ("100-161", 2),
            ("220-287", 3),
            ("345", 4),
            ("500", 5),
            ("DC", 5),
            ("735 AND ABOVE", 6),
            ("NOT AVAILABLE", 1),
            (None, 1),
        ],
    )
    def test_rank_table(self, volt_class, rank):
        assert voltage_rank(volt_class) == rank

    def test_stroke_width_scale(self):
        assert stroke_width(1) == pytest.approx(0.4)
        assert stroke_width(6) == pytest.approx(2.2)
        assert stroke_width(4) == pytest.approx(1.48)

    def test_stroke_color(self):
        assert stroke_color(4) == "#4ade80"
        assert stroke_color(4, "#1f7a4d") == "#1f7a4d"
        assert stroke_color(9) == "#ffffff"

    def test_annotate_without_properties(self):
        feature = annotate_rank({"type": "Feature", "properties": None})
        assert feature["properties"] == {"voltage_rank": 1}


class TestFetch:
    def test_query_parameters(self):
        query = urllib.parse.parse_qs(urllib.parse.urlparse(query_url(4000)).query)
        assert query["resultOffset"] == ["4000"]
        assert query["resultRecordCount"] == ["2000"]
        assert query["f"] == ["geojson"]
        assert query["outSR"] == ["4326"]
        assert query["where"] == ["1=1"]
        assert query["orderByFields"] == ["OBJECTID"]

    def test_pages_until_short_page(self):
        page = [line_feature([[-100, 40], [-99, 41]])]
        server = FakeServer({0: page * 2, 2: page * 2, 4: page})
        collection = fetch_all_transmission_lines(page_size=2, opener=server)
        assert len(collection["features"]) == 5
        assert len(server.urls) == 3
        assert all(f["properties"]["voltage_rank"] == 4 for f in collection["features"])

    def test_offset_cap(self):
        full = [line_feature([[-100, 40], [-99, 41]])] * 2
        server = FakeServer({offset: full for offset in range(0, 100, 2)})
        fetch_all_transmission_lines(page_size=2, max_offset=6, opener=server)
        # offsets 0, 2, 4, 6 and 8; 8 is past the cap so paging stops there
        assert len(server.urls) == 5

    def test_http_error(self):
        def opener(url, timeout=None):
            raise urllib.error.HTTPError(url, 503, "Service Unavailable", {}, io.BytesIO(b"try later"))

        with pytest.raises(FetchError, match=r"\(503\) try later"):
            fetch_all_transmission_lines(opener=opener)

    def test_network_error(self):
        def opener(url, timeout=None):
            raise urllib.error.URLError("name resolution failed")

        with pytest.raises(FetchError, match="URLError"):
            fetch_all_transmission_lines(opener=opener)

    def test_truncated_body(self):
        """A connection dropped mid-body surfaces as FetchError, not a traceback."""
        with pytest.raises(FetchError, match="IncompleteRead"):
            fetch_all_transmission_lines(opener=TruncatedResponse.opener)

    def test_malformed_json(self):
        with pytest.raises(FetchError, match="malformed"):
            fetch_all_transmission_lines(opener=lambda url, timeout=None: FakeResponse(b"<html>"))

    def test_error_payload(self):
        body = json.dumps({"error": {"code": 400, "message": "Invalid query"}}).encode()
        with pytest.raises(FetchError, match="Invalid query"):
            fetch_all_transmission_lines(opener=lambda url, timeout=None: FakeResponse(body))


class TestProjection:
    def test_mainland_center_on_origin(self):
        x, y = albers_usa_unit(-96.6, 38.7)
        assert x == pytest.approx(0.0, abs=1e-9)
        assert y == pytest.approx(0.0, abs=1e-9)

    def test_north_is_up(self):
        _, south = albers_usa_unit(-96.6, 30.0)
        _, north = albers_usa_unit(-96.6, 45.0)
        assert north < south

    @pytest.mark.parametrize(
        "lon, lat, inset",
        [(-74.0, 40.7, LOWER_48), (-149.9, 61.2, ALASKA), (-157.86, 21.31, HAWAII)],
    )
    def test_insets(self, lon, lat, inset):
        point = albers_usa_unit(lon, lat)
        assert point is not None
        (x0, y0), (x1, y1) = inset.clip
        assert x0 <= point[0] <= x1
        assert y0 <= point[1] <= y1

    def test_outside_every_inset(self):
        assert albers_usa_unit(0.0, 0.0) is None

    def test_fit_extent(self):
        features = [line_feature([[-124.0, 48.0], [-70.0, 44.0], [-80.0, 25.5]])]
        extent = ((48, 48), (1552, 852))
        projection = fit_extent(features, extent)
        points = [projection(lon, lat) for lon, lat in features[0]["geometry"]["coordinates"]]
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        assert min(xs) >= 48 - 1e-6 and max(xs) <= 1552 + 1e-6
        assert min(ys) >= 48 - 1e-6 and max(ys) <= 852 + 1e-6
        # one axis fills the extent exactly
        assert math.isclose(max(xs) - min(xs), 1504) or math.isclose(max(ys) - min(ys), 804)

    def test_path_breaks_outside_insets(self):
        projection = fit_extent([line_feature([[-100.0, 40.0], [-90.0, 35.0]])], ((0, 0), (100, 100)))
        d = path_data(projection, {"type": "LineString", "coordinates": [[-100, 40], [0, 0], [-90, 35]]})
        assert d.count("M") == 2
        assert "L" not in d

    def test_path_format(self):
        projection = fit_extent([line_feature([[-100.0, 40.0], [-90.0, 35.0]])], ((0, 0), (100, 100)))
        d = path_data(
            projection,
            {"type": "MultiLineString", "coordinates": [[[-100, 40], [-95, 38]], [[-92, 36], [-90, 35]]]},
        )
        assert d.startswith("M")
        assert d.count("M") == 2 and d.count("L") == 2
        for number in d.replace("M", " ").replace("L", " ").replace(",", " ").split():
            assert len(number.partition(".")[2]) <= 3

    def test_empty_geometry(self):
        projection = fit_extent([], ((0, 0), (10, 10)))
        assert path_data(projection, None) == ""


class TestSvg:
    def test_document(self):
        features = [
            annotate_rank(line_feature([[-100.0, 40.0], [-90.0, 35.0]], "345")),
            annotate_rank(line_feature([[-120.0, 45.0], [-118.0, 44.0]], "735 AND ABOVE")),
            annotate_rank({"type": "Feature", "properties": {}, "geometry": None}),
        ]
        svg = render_svg({"type": "FeatureCollection", "features": features})
        assert svg.startswith('<?xml version="1.0" encoding="UTF-8"?>\n<svg width="1600" height="900"')
        assert 'viewBox="0 0 1600 900"' in svg
        assert svg.count("<path ") == 2
        assert 'stroke="#4ade80"' in svg
        assert 'stroke="#fb923c"' in svg
        assert svg.rstrip().endswith("</svg>")

    def test_mono_color(self):
        projection = fit_extent([], ((0, 0), (10, 10)))
        markup = feature_path_markup(
            projection, annotate_rank(line_feature([[-100.0, 40.0], [-90.0, 35.0]], "DC")), "#1f7a4d"
        )
        assert 'stroke="#1f7a4d"' in markup
        assert 'stroke-linecap="round"' in markup
        assert 'opacity="0.9"' in markup

    def test_stroke_attribute_is_escaped(self):
        projection = fit_extent([], ((0, 0), (10, 10)))
        markup = feature_path_markup(
            projection, annotate_rank(line_feature([[-100.0, 40.0], [-90.0, 35.0]])), 'red"><script>'
        )
        assert "<script>" not in markup
        assert 'stroke="red&quot;&gt;&lt;script&gt;"' in markup


class TestCli:
    @pytest.fixture
    def collection(self):
        return {
            "type": "FeatureCollection",
            "features": [annotate_rank(line_feature([[-100.0, 40.0], [-90.0, 35.0]]))],
        }

    @pytest.fixture
    def workdir(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        return tmp_path

    def test_default_output(self, monkeypatch, workdir, collection):
        monkeypatch.setattr(cli, "fetch_all_transmission_lines", lambda **kwargs: collection)
        result = CliRunner().invoke(cli.main, [])
        assert result.exit_code == 0, result.output
        assert 'stroke="#4ade80"' in (workdir / "static-grid.svg").read_text(encoding="utf-8")

    def test_mono_output_name(self, monkeypatch, workdir, collection):
        monkeypatch.setattr(cli, "fetch_all_transmission_lines", lambda **kwargs: collection)
        result = CliRunner().invoke(cli.main, ["--color=#1f7a4d"])
        assert result.exit_code == 0, result.output
        assert 'stroke="#1f7a4d"' in (workdir / "static-grid-mono.svg").read_text(encoding="utf-8")

    def test_custom_out(self, monkeypatch, workdir, collection):
        monkeypatch.setattr(cli, "fetch_all_transmission_lines", lambda **kwargs: collection)
        result = CliRunner().invoke(cli.main, ["--out=maps/grid.svg"])
        assert result.exit_code == 0, result.output
        assert (workdir / "maps" / "grid.svg").read_text(encoding="utf-8").startswith("<?xml")

    @pytest.mark.parametrize("color", ['"><x', "red", "#12345", "1f7a4d"])
    def test_rejects_non_hex_color(self, monkeypatch, workdir, collection, color):
        monkeypatch.setattr(cli, "fetch_all_transmission_lines", lambda **kwargs: collection)
        result = CliRunner().invoke(cli.main, [f"--color={color}"])
        assert result.exit_code == 2
        assert "hex color" in result.output
        assert not (workdir / "static-grid-mono.svg").exists()

    def test_short_hex_color(self, monkeypatch, workdir, collection):
        monkeypatch.setattr(cli, "fetch_all_transmission_lines", lambda **kwargs: collection)
        result = CliRunner().invoke(cli.main, ["--color=#fff"])
        assert result.exit_code == 0, result.output
        assert 'stroke="#fff"' in (workdir / "static-grid-mono.svg").read_text(encoding="utf-8")

    def test_log_file(self, monkeypatch, workdir, collection):
        monkeypatch.setattr(cli, "fetch_all_transmission_lines", lambda **kwargs: collection)
        result = CliRunner().invoke(cli.main, ["--log-file=logs/render.log"])
        assert result.exit_code == 0, result.output
        log = (workdir / "logs" / "render.log").read_text(encoding="utf-8")
        assert "Fetched 1 transmission segments" in log
        assert "Wrote static-grid.svg" in log

    def test_log_file_appends(self, monkeypatch, workdir, collection):
        monkeypatch.setattr(cli, "fetch_all_transmission_lines", lambda **kwargs: collection)
        runner = CliRunner()
        runner.invoke(cli.main, ["--log-file=render.log"])
        runner.invoke(cli.main, ["--log-file=render.log"])
        log = (workdir / "render.log").read_text(encoding="utf-8")
        assert log.count("Wrote static-grid.svg") == 2

    def test_fetch_failure_exits_nonzero(self, monkeypatch, workdir):
        def failing(**kwargs):
            raise FetchError("ArcGIS request failed (500) boom")

        monkeypatch.setattr(cli, "fetch_all_transmission_lines", failing)
        result = CliRunner().invoke(cli.main, [])
        assert result.exit_code == 1
        assert "ArcGIS request failed (500) boom" in result.output
        assert not (workdir / "static-grid.svg").exists()

    def test_truncated_body_exits_nonzero(self, monkeypatch, workdir):
        real_fetch = cli.fetch_all_transmission_lines

        def truncated(**kwargs):
            kwargs["opener"] = TruncatedResponse.opener
            return real_fetch(**kwargs)

        monkeypatch.setattr(cli, "fetch_all_transmission_lines", truncated)
        result = CliRunner().invoke(cli.main, [])
        assert result.exit_code == 1
        assert "ERROR" in result.output
        assert "IncompleteRead" in result.output

    def test_timeout_from_env(self, monkeypatch):
        monkeypatch.setenv("GRID_RENDER_TIMEOUT", "5")
        settings = cli.resolve_settings(None, None)
        assert settings.timeout == 5.0
        assert str(settings.output) == "static-grid.svg"
