"""Tests for CLI argument parsing and the run flow."""

import io
import json
from unittest.mock import patch

import pytest

from cli import EXIT_CANCELLED, parse_args, run
from core.cancellation import CancellationToken
from core.exceptions import ClusterQueryFailed, ConfigurationException

from conftest import PINNED_HEX, FakeCluster, FakeInspector, make_pod


class TestParseArgs:
    """Tests for parse_args."""

    def test_defaults(self):
        args = parse_args([])
        assert args.output == "table"
        assert args.namespace is None
        assert args.all_namespaces is False
        assert args.pod is None
        assert args.inspector == "auto"

    def test_short_flags(self):
        args = parse_args(["-n", "shop", "-o", "JSON", "-p", "web"])
        assert args.namespace == "shop"
        assert args.output == "json"
        assert args.pod == "web"

    def test_all_namespaces_with_pod_rejected(self):
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["-A", "-p", "web"])
        assert exc_info.value.code == 2

    def test_invalid_output_rejected(self):
        with pytest.raises(SystemExit):
            parse_args(["-o", "xml"])


class TestRun:
    """Tests for run() with fake collaborators."""

    @pytest.fixture
    def cluster(self):
        return FakeCluster(
            pods=[
                make_pod("web", "busybox:1.36"),
                make_pod("broken", "missing:1.0"),
                make_pod("api", f"ghcr.io/org/app@sha256:{PINNED_HEX}", namespace="backend"),
            ],
            nodes={"node-1": "amd64"},
        )

    @pytest.fixture
    def wired(self, fake_inspector, cluster):
        with patch("cli.DockerManifestInspector", return_value=fake_inspector), \
                patch("cli.KubectlCluster", return_value=cluster):
            yield

    def test_scan_renders_json(self, wired):
        stream = io.StringIO()
        code = run(parse_args(["-A", "-o", "json"]), stream)

        assert code == 0
        data = json.loads(stream.getvalue())
        assert [(p["namespace"], p["pod_name"]) for p in data] == [
            ("backend", "api"),
            ("default", "web"),
        ]

    def test_single_pod_failure_exits_nonzero(self, wired):
        stream = io.StringIO()
        assert run(parse_args(["-p", "broken", "-n", "default"]), stream) == 1
        assert stream.getvalue() == ""

    def test_single_pod_table(self, wired):
        stream = io.StringIO()
        assert run(parse_args(["-p", "web"]), stream) == 0
        assert stream.getvalue().startswith("Pod: web (Namespace: default)\n")

    def test_cluster_failure_exits_nonzero(self, fake_inspector):
        class Unreachable(FakeCluster):
            def list_pods(self, namespace=None, all_namespaces=False, cancel_token=None):
                raise ClusterQueryFailed("List pods", "connection refused")

        with patch("cli.DockerManifestInspector", return_value=fake_inspector), \
                patch("cli.KubectlCluster", return_value=Unreachable()):
            assert run(parse_args([]), io.StringIO()) == 1

    def test_missing_inspector_exits_nonzero(self):
        with patch("cli.DockerManifestInspector", side_effect=ConfigurationException("no tools")):
            assert run(parse_args([]), io.StringIO()) == 1

    def test_invalid_max_workers(self, wired):
        assert run(parse_args(["--max-workers", "0"]), io.StringIO()) == 1

    def test_cancelled_scan_exit_code(self, wired):
        with patch("cli.CancellationToken") as mock_token_cls:
            token = CancellationToken()
            token.cancel("interrupted")
            mock_token_cls.return_value = token

            stream = io.StringIO()
            assert run(parse_args(["-A", "-o", "json"]), stream) == EXIT_CANCELLED

        assert json.loads(stream.getvalue()) == []

    def test_single_pod_timeout_exit_code(self, cluster):
        class HangingInspector(FakeInspector):
            def inspect(self, reference, cancel_token=None):
                cancel_token.wait(10)
                cancel_token.raise_if_cancelled()
                return super().inspect(reference, cancel_token)

        stream = io.StringIO()
        with patch("cli.DockerManifestInspector", return_value=HangingInspector()), \
                patch("cli.KubectlCluster", return_value=cluster):
            code = run(parse_args(["-p", "web", "--timeout", "1"]), stream)

        assert code == EXIT_CANCELLED
        assert stream.getvalue() == ""
