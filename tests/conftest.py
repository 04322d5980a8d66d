"""Shared fixtures: CSV text builders and a small district FeatureCollection."""

import json
import sys

import pytest
from loguru import logger
from shapely.geometry import Point, box, mapping

from ops.config_loader import Config
from processing.csv_parser import quote_field

HEADERS = [
    "District",
    "Date",
    "Name",
    "Age",
    "Accused Of",
    "Cause of Death",
    "News Brief",
    "Source URL 1",
    "Source URL 2",
    "Year Sheet",
    "Spontaneous Mob",
]

ROW_DEFAULTS = {
    "District": "Dhaka",
    "Date": "2023-01-01",
    "Name": "Unknown",
    "Age": "",
    "Accused Of": "Theft",
    "Cause of Death": "Beating",
    "News Brief": "",
    "Source URL 1": "",
    "Source URL 2": "",
    "Year Sheet": "2023",
    "Spontaneous Mob": "",
}


def make_csv(rows, headers=HEADERS, newline="\n"):
    """Build CSV text from row dicts keyed by display header."""
    lines = [",".join(quote_field(h) for h in headers)]
    for row in rows:
        values = {**ROW_DEFAULTS, **row}
        lines.append(",".join(quote_field(str(values.get(h, ""))) for h in headers))
    return newline.join(lines) + newline


def make_feature(name_props, geometry=None):
    return {
        "type": "Feature",
        "properties": name_props,
        "geometry": geometry if geometry is not None else mapping(box(90.0, 23.0, 90.5, 23.5)),
    }


@pytest.fixture
def csv_text_25():
    """25 rows: 12 from 2023 then 13 from 2025, names numbered in source order."""
    rows = [
        {"Name": f"Person {i}", "Year Sheet": "2023" if i <= 12 else "2025"}
        for i in range(1, 26)
    ]
    return make_csv(rows)


@pytest.fixture
def district_features():
    return [
        make_feature({"ADM2_EN": "Chattogram"}, mapping(box(91.0, 22.0, 92.0, 23.0))),
        make_feature({"ADM2_EN": "Dhaka"}, mapping(box(90.0, 23.5, 90.7, 24.0))),
        make_feature({"ADM2_EN": "Barishal"}, mapping(box(90.0, 22.3, 90.6, 22.9))),
        make_feature({"shapeID": "X1"}, mapping(box(88.0, 24.0, 88.5, 24.5))),
    ]


@pytest.fixture
def boundary_text(district_features):
    point = {"type": "Feature", "properties": {"name": "Marker"}, "geometry": mapping(Point(90.4, 23.8))}
    return json.dumps({"type": "FeatureCollection", "features": district_features + [point]})


@pytest.fixture
def project_dir(tmp_path, csv_text_25, boundary_text):
    """Project root with data/ holding the incident CSV and boundary GeoJSON."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "mob_violence_cleaned.csv").write_text(csv_text_25, encoding="utf-8")
    (data_dir / "bangladesh_districts.geojson").write_text(boundary_text, encoding="utf-8")
    return tmp_path


@pytest.fixture
def make_config(project_dir):
    def _make(**overrides):
        config = Config.from_dict({}, project_root=project_dir)
        for key, value in overrides.items():
            config.set_override(key.replace("__", "."), value)
        return config

    return _make


@pytest.fixture
def log_messages():
    """Capture loguru output for assertions."""
    messages = []
    handler_id = logger.add(lambda msg: messages.append(msg.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture(autouse=True)
def reset_logging():
    """The CLI reconfigures loguru sinks; restore a plain stderr sink afterwards."""
    yield
    logger.remove()
    logger.add(sys.stderr, level="WARNING")
