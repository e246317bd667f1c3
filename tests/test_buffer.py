import json
from unittest.mock import patch

import pytest
import yaml

from metamodel_openapi.buffer import Buffer
from metamodel_openapi.errors import ConfigurationError, OutputError
from metamodel_openapi.reporter import Reporter


def _filled(tmp_path, fmt="json") -> Buffer:
    buffer = Buffer(output=tmp_path, package="clusters_mgmt/v1", fmt=fmt)
    with buffer.object():
        buffer.field("openapi", "3.0.0")
        with buffer.object("info"):
            buffer.field("title", "clusters_mgmt")
        with buffer.array("security"):
            with buffer.object():
                with buffer.array("bearer"):
                    pass
    return buffer


class TestBufferConfiguration:
    def test_output_is_mandatory(self):
        with pytest.raises(ConfigurationError, match="output directory is mandatory"):
            Buffer(output=None, package="clusters_mgmt/v1")

    def test_package_is_mandatory(self, tmp_path):
        with pytest.raises(ConfigurationError, match="package is mandatory"):
            Buffer(output=tmp_path, package="")

    def test_unknown_format(self, tmp_path):
        with pytest.raises(ConfigurationError):
            Buffer(output=tmp_path, package="p", fmt="xml")

    def test_path(self, tmp_path):
        buffer = Buffer(output=tmp_path, package="clusters_mgmt/v1", fmt="yaml")
        assert buffer.path == tmp_path / "clusters_mgmt" / "v1" / "openapi.yaml"


class TestBufferStructure:
    def test_nested_document(self, tmp_path):
        buffer = _filled(tmp_path)
        assert buffer.document == {
            "openapi": "3.0.0",
            "info": {"title": "clusters_mgmt"},
            "security": [{"bearer": []}],
        }

    def test_keys_keep_insertion_order(self, tmp_path):
        buffer = Buffer(output=tmp_path, package="p")
        with buffer.object():
            for key in ("z", "a", "m"):
                buffer.field(key, 1)
        assert list(buffer.document) == ["z", "a", "m"]

    def test_field_in_array_rejected(self, tmp_path):
        buffer = Buffer(output=tmp_path, package="p")
        with pytest.raises(OutputError):
            with buffer.object():
                with buffer.array("items"):
                    buffer.field("name", "x")

    def test_item_in_object_rejected(self, tmp_path):
        buffer = Buffer(output=tmp_path, package="p")
        with pytest.raises(OutputError):
            with buffer.object():
                buffer.item("x")

    def test_object_member_needs_key(self, tmp_path):
        buffer = Buffer(output=tmp_path, package="p")
        with pytest.raises(OutputError):
            with buffer.object():
                with buffer.object():
                    pass

    def test_single_root(self, tmp_path):
        buffer = _filled(tmp_path)
        with pytest.raises(OutputError):
            with buffer.object():
                pass

    def test_scopes_closed_after_error(self, tmp_path):
        buffer = Buffer(output=tmp_path, package="p")
        with pytest.raises(OutputError):
            with buffer.object():
                with buffer.array("items"):
                    buffer.field("bad", 1)
        # The document is complete even though building it failed half way
        assert buffer.document == {"items": []}
        buffer.render()


class TestBufferWrite:
    def test_write_json(self, tmp_path):
        reporter = Reporter(quiet=True)
        buffer = _filled(tmp_path)
        buffer.reporter = reporter
        path = buffer.write()
        assert path == tmp_path / "clusters_mgmt" / "v1" / "openapi.json"
        text = path.read_text(encoding="utf-8")
        assert text.endswith("\n")
        assert json.loads(text)["security"] == [{"bearer": []}]
        assert any("openapi.json" in m for m in reporter.messages)

    def test_write_yaml(self, tmp_path):
        path = _filled(tmp_path, fmt="yaml").write()
        text = path.read_text(encoding="utf-8")
        assert text.startswith("openapi:")
        assert yaml.safe_load(text)["openapi"] == "3.0.0"
        assert yaml.safe_load(text)["info"] == {"title": "clusters_mgmt"}

    def test_write_incomplete_document(self, tmp_path):
        buffer = Buffer(output=tmp_path, package="p")
        with pytest.raises(OutputError):
            buffer.write()

    def test_write_failure_is_output_error(self, tmp_path):
        buffer = _filled(tmp_path)
        with patch("pathlib.Path.write_text", side_effect=PermissionError("denied")):
            with pytest.raises(OutputError, match="denied") as info:
                buffer.write()
        assert isinstance(info.value.__cause__, PermissionError)
