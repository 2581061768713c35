"""Tests for the command-line interface and JSON export."""

import json
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from brandpulse import cli
from brandpulse.core.events import CollectingEventSink
from brandpulse.core.models import Sentiment
from brandpulse.services.analysis import BrandAnalysisService
from brandpulse.services.fanout import FanOutExecutor
from brandpulse.utils.data_prep import export_to_json, to_jsonable
from conftest import FakeProvider

ARTIFACTS = [
    {
        "id": "artifact_1_aaaaaaaaa",
        "type": "visibility-matrix",
        "title": "Brand Visibility Analysis - Tesla",
        "content": {"brandName": "Tesla", "overallScore": 81},
        "metadata": {"timestamp": "2024-05-01T00:00:00Z", "tags": ["geo"]},
    },
    {
        "id": "artifact_2_bbbbbbbbb",
        "type": "brand-monitor",
        "title": "Brand Monitoring Report - Tesla",
        "content": {"brand_name": "Tesla", "mention_count": 3},
        "metadata": {"timestamp": "2024-05-01T06:00:00Z"},
    },
]


class TestDataPrep:

    def test_to_jsonable(self):
        value = {"when": datetime(2024, 5, 1, tzinfo=timezone.utc), "s": Sentiment.POSITIVE, "t": (1, 2)}
        assert to_jsonable(value) == {"when": "2024-05-01T00:00:00+00:00", "s": "positive", "t": [1, 2]}

    def test_export_stamps_timestamp(self, tmp_path):
        out = tmp_path / "report.json"
        export_to_json({"brand_name": "Tesla", "metadata": {"category": "x"}}, str(out))
        saved = json.loads(out.read_text(encoding="utf-8"))
        assert saved["brand_name"] == "Tesla"
        assert saved["metadata"]["category"] == "x"
        assert "export_timestamp" in saved["metadata"]

    def test_export_wraps_lists(self, tmp_path):
        out = tmp_path / "list.json"
        payload = export_to_json([1, 2], str(out))
        assert payload["data"] == [1, 2]
        assert "export_timestamp" in payload["metadata"]


class TestCli:

    @pytest.fixture
    def artifacts_file(self, tmp_path):
        path = tmp_path / "artifacts.json"
        path.write_text(json.dumps(ARTIFACTS), encoding="utf-8")
        return str(path)

    @pytest.fixture
    def service(self, fast_policy):
        events = CollectingEventSink()
        return BrandAnalysisService(
            providers=[FakeProvider("p", answer="Tesla is excellent.")],
            executor=FanOutExecutor(fast_policy, events=events),
            events=events,
        )

    def test_no_command_prints_help(self, capsys):
        cli.main([])
        assert "usage" in capsys.readouterr().out

    def test_categorize(self, artifacts_file, capsys):
        cli.main(["categorize", artifacts_file])
        data = json.loads(capsys.readouterr().out)
        categories = [a["category"] for a in data["artifacts"]]
        assert categories == ["brand-visibility", "brand-monitoring"]
        assert data["artifacts"][0]["related_artifacts"] == ["artifact_2_bbbbbbbbb"]
        assert data["stats"]["total_artifacts"] == 2

    def test_categorize_graph(self, artifacts_file, capsys):
        cli.main(["categorize", artifacts_file, "--graph"])
        data = json.loads(capsys.readouterr().out)
        assert len(data["nodes"]) == 2
        assert {e["kind"] for e in data["edges"]} == {"brand"}

    def test_visibility_writes_report(self, service, tmp_path, capsys):
        out = tmp_path / "visibility.json"
        with patch("brandpulse.cli.build_service", return_value=service):
            cli.main(["visibility", "Tesla", "--out", str(out)])
        saved = json.loads(out.read_text(encoding="utf-8"))
        assert saved["brand_name"] == "Tesla"
        assert saved["overall_score"] == 30
        assert "export_timestamp" in saved["metadata"]
        assert "Overall visibility: 30/100" in capsys.readouterr().out

    def test_invalid_input_exits_2(self, service):
        with patch("brandpulse.cli.build_service", return_value=service):
            with pytest.raises(SystemExit) as exc:
                cli.main(["compete", "Tesla", "--competitors", "Tesla"])
        assert exc.value.code == 2

    def test_export_missing_file_exits_2(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            cli.main(["export", "--in", str(tmp_path / "missing.json")])
        assert exc.value.code == 2

    def test_export(self, artifacts_file, tmp_path):
        out = tmp_path / "exported.json"
        cli.main(["export", "--in", artifacts_file, "--out", str(out)])
        saved = json.loads(out.read_text(encoding="utf-8"))
        assert len(saved["data"]) == 2

    def test_unexpected_error_exits_1(self):
        with patch("brandpulse.cli.build_service", side_effect=RuntimeError("boom")):
            with pytest.raises(SystemExit) as exc:
                cli.main(["visibility", "Tesla"])
        assert exc.value.code == 1
