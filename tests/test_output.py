"""Tests for JSON and tree output of location chains."""

import json

from rich.console import Console

from elsource.models import SourceLocation, SourceLocationResult
from elsource.output import location_to_dict, print_json, print_location_tree, result_to_dict


def chain():
    root = SourceLocation(file="/src/Layout.tsx", line=8, column=4, component_name="Layout", tag_name="MAIN")
    return SourceLocation(
        file="/src/Card.tsx", line=12, column=5, component_name="Card", tag_name="BUTTON",
        source_code="<button />", parent=root,
    )


class TestLocationToDict:
    def test_nested_parent(self):
        data = location_to_dict(chain())
        assert data["componentName"] == "Card"
        assert data["sourceCode"] == "<button />"
        assert data["parent"]["file"] == "/src/Layout.tsx"
        assert "parent" not in data["parent"]
        assert "sourceCode" not in data["parent"]

    def test_without_parent(self):
        assert "parent" not in location_to_dict(chain(), include_parent=False)

    def test_results(self):
        assert result_to_dict(SourceLocationResult.fail("nope")) == {"success": False, "error": "nope"}
        ok = result_to_dict(SourceLocationResult.ok(chain()))
        assert ok["success"] is True
        assert ok["data"]["line"] == 12


class TestPrinters:
    def test_print_json(self, capsys):
        print_json({"file": "/src/Über.tsx", "line": 1})
        assert json.loads(capsys.readouterr().out) == {"file": "/src/Über.tsx", "line": 1}

    def test_print_location_tree(self):
        console = Console(record=True, width=120)
        print_location_tree(chain(), console)
        text = console.export_text()
        assert "<button> Card (/src/Card.tsx:12:5)" in text
        assert "[1] <main> Layout (/src/Layout.tsx:8:4)" in text
