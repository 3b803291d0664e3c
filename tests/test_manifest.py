"""Tests for manifest parsing, quantity expansion and layout export."""

import csv
import json
import random

import pytest

from part_stacker.algorithms.grid_packer import place
from part_stacker.core.errors import ManifestError
from part_stacker.core.models import Container
from part_stacker.runner.export import export_layout_csv, export_layout_json, layout_rows
from part_stacker.runner.manifest import (
    PALETTE,
    PartSpec,
    expand,
    load_container,
    load_manifest,
    parse_line,
    parse_text,
    read_manifest,
    scale_channel,
    shade,
)


# ---------------------------------------------------------------------------
# 1. Text line formats
# ---------------------------------------------------------------------------

class TestParseLine:
    @pytest.mark.parametrize("line", [
        "Bracket, 10, 20, 30",
        "Bracket,10,20,30",
        "Bracket: 10 x 20 x 30",
        "Bracket 10x20x30",
        "Bracket\t10\t20\t30",
    ])
    def test_known_forms(self, line):
        spec = parse_line(line)
        assert spec is not None
        assert (spec.name, spec.width, spec.height, spec.depth) == ("Bracket", 10, 20, 30)

    def test_decimal_values(self):
        spec = parse_line("Shim, 0.5, 1.25, 2.")
        assert (spec.width, spec.height, spec.depth) == (0.5, 1.25, 2.0)

    def test_name_with_spaces_and_digits(self):
        spec = parse_line("M8 bolt box: 2 x 3 x 4")
        assert spec.name == "M8 bolt box"

    @pytest.mark.parametrize("line", [
        "",
        "name,width,height,depth",
        "just some words",
        "Flat, 0, 1, 1",
        "Tabbed\tone\ttwo\tthree",
    ])
    def test_unrecognised_lines(self, line):
        assert parse_line(line) is None

    def test_parse_text_skips_header_and_blanks(self):
        content = "name,width,height,depth\n\nA, 1, 2, 3\nB: 4 x 5 x 6\n"
        assert [s.name for s in parse_text(content)] == ["A", "B"]


# ---------------------------------------------------------------------------
# 2. Quantity expansion and colors
# ---------------------------------------------------------------------------

class TestExpand:
    def test_single_part_keeps_name_and_color(self):
        (part,) = expand(PartSpec(name="Lid", width=1, height=1, depth=1, color="#3b82f6"))
        assert part.name == "Lid"
        assert part.color == "#3b82f6"

    def test_quantity_expands_with_numbered_names(self):
        parts = expand(PartSpec(name="Bolt", width=1, height=2, depth=3,
                                color="#808080", quantity=3))
        assert [p.name for p in parts] == ["Bolt #1", "Bolt #2", "Bolt #3"]
        assert len({p.id for p in parts}) == 3
        assert [p.color for p in parts] == ["#6d6d6d", "#808080", "#939393"]

    def test_shade_clamps_channels(self):
        assert shade("#ffffff", 1, 2) == "#ffffff"
        assert shade("#000000", 0, 2) == "#000000"

    @pytest.mark.parametrize("value, factor, expected", [
        (5, 0.5, 3),      # 2.5 rounds up, not to even
        (1, 0.5, 1),      # 0.5
        (200, 1.5, 255),  # clamped
    ])
    def test_scale_channel_rounds_halves_up(self, value, factor, expected):
        assert scale_channel(value, factor) == expected

    def test_random_color_from_palette(self):
        (part,) = expand(PartSpec(name="X", width=1, height=1, depth=1), random.Random(1))
        assert part.color in PALETTE

    def test_spec_validation(self):
        with pytest.raises(ValueError):
            PartSpec(name="Bad", width=-1, height=1, depth=1)
        with pytest.raises(ValueError):
            PartSpec(name="Bad", width=1, height=1, depth=1, quantity=0)
        with pytest.raises(ValueError):
            PartSpec(name="Bad", width=1, height=1, depth=1, color="blue")


# ---------------------------------------------------------------------------
# 3. Manifest files
# ---------------------------------------------------------------------------

class TestManifestFiles:
    def test_yaml_manifest(self, tmp_path):
        path = tmp_path / "parts.yaml"
        path.write_text(
            "container: {width: 10, height: 4, depth: 10}\n"
            "parts:\n"
            "  - {name: Slab, width: 5, height: 2, depth: 5, quantity: 2}\n"
            "  - {name: Cap, width: 1, height: 1, depth: 1, color: '#10b981'}\n"
        )
        parts = load_manifest(path)
        assert [p.name for p in parts] == ["Slab #1", "Slab #2", "Cap"]
        assert load_container(path) == Container.of(10, 4, 10)

    def test_yaml_list_shorthand(self, tmp_path):
        path = tmp_path / "parts.yml"
        path.write_text("- {name: A, width: 1, height: 1, depth: 1}\n")
        assert len(load_manifest(path)) == 1
        assert load_container(path) is None

    def test_csv_manifest(self, tmp_path):
        path = tmp_path / "parts.csv"
        path.write_text("A, 1, 2, 3\nB, 4, 5, 6\n")
        assert [p.name for p in load_manifest(path)] == ["A", "B"]

    def test_invalid_entry(self, tmp_path):
        path = tmp_path / "parts.yaml"
        path.write_text("parts:\n  - {name: A, width: 0, height: 1, depth: 1}\n")
        with pytest.raises(ManifestError):
            read_manifest(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "parts.yaml"
        path.write_text("parts: [unclosed\n")
        with pytest.raises(ManifestError):
            read_manifest(path)

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "parts.pdf"
        path.write_text("A, 1, 1, 1")
        with pytest.raises(ManifestError):
            read_manifest(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ManifestError):
            read_manifest(tmp_path / "nope.yaml")


# ---------------------------------------------------------------------------
# 4. Layout export
# ---------------------------------------------------------------------------

class TestLayoutExport:
    @pytest.fixture
    def layout(self, cube_container):
        specs = parse_text("Big, 6, 6, 6\nBig too, 6, 6, 6\nSmall, 2, 2, 2\n")
        parts = [p for s in specs for p in expand(s, random.Random(0))]
        return place(parts, cube_container)

    def test_rows(self, layout, cube_container):
        rows = layout_rows(layout, cube_container)
        assert [r["name"] for r in rows] == ["Big", "Big too", "Small"]
        assert [r["status"] for r in rows] == ["placed", "unplaced", "placed"]
        assert [r["fits"] for r in rows] == [True, False, True]
        assert rows[1]["y"] == 12.0

    def test_json(self, layout, cube_container, tmp_path):
        out = tmp_path / "out" / "layout.json"
        export_layout_json(layout, cube_container, out)
        data = json.loads(out.read_text())
        assert data["container"] == {"width": 10.0, "height": 10.0, "depth": 10.0}
        assert len(data["parts"]) == 3

    def test_csv(self, layout, cube_container, tmp_path):
        out = tmp_path / "layout.csv"
        export_layout_csv(layout, cube_container, out)
        with out.open() as f:
            rows = list(csv.DictReader(f))
        assert [r["status"] for r in rows] == ["placed", "unplaced", "placed"]
