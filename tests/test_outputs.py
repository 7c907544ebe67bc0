"""Tests for table, JSON and YAML renderers."""

import io
import json

import pytest
import yaml

from core.exceptions import ValidationException
from core.models import ImageRecord, PodReport
from outputs import JSONGenerator, TableGenerator, YAMLGenerator, get_generator


@pytest.fixture
def reports():
    return [
        PodReport(
            pod_name="web",
            namespace="default",
            images=(
                ImageRecord("init", "busybox", "1.36", None, 512000, "500 KB"),
                ImageRecord("nginx", "docker.io/library/nginx", "1.25", "sha256:d1", 3145728, "3 MB"),
            ),
        ),
        PodReport(
            pod_name="api",
            namespace="backend",
            images=(ImageRecord("app", "ghcr.io/org/app", "N/A", "sha256:abc", 1073741824, "1.00 GB"),),
        ),
    ]


class TestTableGenerator:
    """Tests for the table renderer."""

    def test_pod_heading_and_columns(self, reports):
        lines = TableGenerator().render(reports).splitlines()
        assert lines[0] == "Pod: web (Namespace: default)"
        assert lines[1].split() == ["CONTAINER", "NAME", "IMAGE", "URI", "TAG", "SHA", "DIGEST", "SIZE"]
        assert lines[4] == ""
        assert lines[5] == "Pod: api (Namespace: backend)"

    def test_columns_aligned_across_pods(self, reports):
        lines = TableGenerator().render(reports).splitlines()
        digest_column = lines[1].index("SHA DIGEST")
        for row, digest in [(lines[2], "N/A"), (lines[3], "sha256:d1"), (lines[7], "sha256:abc")]:
            assert row[digest_column:].startswith(digest)

    def test_missing_digest_placeholder(self, reports):
        row = TableGenerator().render(reports).splitlines()[2]
        assert row.split() == ["init", "busybox", "1.36", "N/A", "500", "KB"]

    def test_no_reports(self):
        assert TableGenerator().render([]) == ""


class TestStructuredGenerators:
    """Tests for the JSON and YAML renderers."""

    def test_json_keys(self, reports):
        data = json.loads(JSONGenerator().render(reports))
        assert list(data[0]) == ["pod_name", "namespace", "images"]
        assert data[0]["images"][1] == {
            "container_name": "nginx",
            "repository": "docker.io/library/nginx",
            "tag": "1.25",
            "digest": "sha256:d1",
            "size_bytes": 3145728,
            "size": "3 MB",
        }
        assert data[0]["images"][0]["digest"] is None

    def test_yaml_matches_json(self, reports):
        from_yaml = yaml.safe_load(YAMLGenerator().render(reports))
        from_json = json.loads(JSONGenerator().render(reports))
        assert from_yaml == from_json

    def test_yaml_keeps_key_order(self, reports):
        text = YAMLGenerator().render(reports)
        assert text.index("pod_name") < text.index("namespace") < text.index("images")

    def test_empty_json_list(self):
        assert json.loads(JSONGenerator().render([])) == []


class TestGetGenerator:
    """Tests for generator lookup."""

    @pytest.mark.parametrize("name,cls", [
        ("table", TableGenerator),
        ("JSON", JSONGenerator),
        ("yaml", YAMLGenerator),
    ])
    def test_lookup(self, name, cls):
        generator = get_generator(name)
        assert isinstance(generator, cls)
        assert generator.supports_format() == name.lower()

    def test_unknown_format(self):
        with pytest.raises(ValidationException, match="Unsupported format"):
            get_generator("xml")

    def test_generate_writes_trailing_newline(self, reports):
        stream = io.StringIO()
        JSONGenerator().generate(reports, stream)
        assert stream.getvalue().endswith("]\n")
