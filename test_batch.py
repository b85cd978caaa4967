"""Tests for bulk comparison, configuration loading and the dataset runner."""

import json
import threading
import time

import pytest
from snapdiff import (
    EngineConfig,
    Severity,
    ConfigError,
    SnapDiffEngine,
    SnapDiffRunner,
    compare_all,
    load_config,
)
from snapdiff.config import parse_config
from test_snapdiff import make_snapshot


def cyclic_snapshot():
    body = {"name": "loop"}
    body["self"] = body
    return make_snapshot(body, name="cyclic")


class TestCompareAll:
    """Test concurrent comparison of many endpoints."""

    def test_results_in_input_order(self):
        """Test one result per pair, in the order given."""
        pairs = [
            (f"endpoint-{i}", make_snapshot({"n": 1}), make_snapshot({"n": i}))
            for i in range(6)
        ]
        report = compare_all(pairs, config=EngineConfig(max_workers=2))

        assert [r.name for r in report.results] == [f"endpoint-{i}" for i in range(6)]
        assert [r.name for r in report.unchanged] == ["endpoint-1"]
        assert len(report.changed) == 5
        assert report.failed == []

    def test_failure_is_isolated(self):
        """Test a failing endpoint does not abort its siblings."""
        pairs = [
            ("ok", make_snapshot({"id": 1}), make_snapshot({"id": 2})),
            ("cyclic", cyclic_snapshot(), cyclic_snapshot()),
            ("broken", {"endpoint": {"name": "broken"}}, make_snapshot({})),
            ("same", make_snapshot({}), make_snapshot({})),
        ]
        report = compare_all(pairs)

        by_name = {r.name: r for r in report.results}
        assert by_name["ok"].succeeded
        assert by_name["ok"].comparison.has_breaking_changes
        assert by_name["cyclic"].error["code"] == "MAX_DEPTH_ERROR"
        assert by_name["broken"].error["code"] == "VALIDATION_ERROR"
        assert by_name["same"].succeeded
        assert not by_name["same"].comparison.has_changes

        summary = report.to_dict()["summary"]
        assert summary == {
            "total_endpoints": 4,
            "unchanged": 1,
            "changed": 1,
            "breaking": 1,
            "failed": 2,
        }

    def test_rules_apply_to_every_endpoint(self):
        """Test caller rules reach each comparison."""
        pairs = [
            ("a", make_snapshot({"id": 1}), make_snapshot({"id": 2})),
            ("b", make_snapshot({"id": 3}), make_snapshot({"id": 4})),
        ]
        report = compare_all(pairs, rules=[{"path": "response.data.id", "ignore": True}])
        assert all(not r.comparison.has_changes for r in report.results)

    def test_empty_input(self):
        """Test no pairs gives an empty report."""
        report = compare_all([])
        assert report.total == 0
        assert report.to_dict()["endpoints"] == []

    def test_print_summary(self, capsys):
        """Test the console summary lists failures."""
        report = compare_all([("cyclic", cyclic_snapshot(), cyclic_snapshot())])
        report.print_summary()
        out = capsys.readouterr().out
        assert "Compared 1 endpoints" in out
        assert "cyclic: Maximum depth" in out

    def test_max_workers_bounds_concurrency(self, monkeypatch):
        """Test no more than max_workers comparisons run at once."""
        lock = threading.Lock()
        state = {"active": 0, "peak": 0}
        real_compare = SnapDiffEngine.compare

        def slow_compare(self, baseline, current, rules=None):
            with lock:
                state["active"] += 1
                state["peak"] = max(state["peak"], state["active"])
            try:
                time.sleep(0.05)
                return real_compare(self, baseline, current, rules)
            finally:
                with lock:
                    state["active"] -= 1

        monkeypatch.setattr(SnapDiffEngine, "compare", slow_compare)
        pairs = [
            (f"endpoint-{i}", make_snapshot({"n": i}), make_snapshot({"n": i}))
            for i in range(6)
        ]
        report = compare_all(pairs, config=EngineConfig(max_workers=2))

        assert report.total == 6
        assert len(report.unchanged) == 6
        assert 1 <= state["peak"] <= 2


class TestConfig:
    """Test configuration loading."""

    def test_load_yaml(self, tmp_path):
        """Test engine settings and rules from YAML."""
        path = tmp_path / "snapdiff.yaml"
        path.write_text(
            "max_depth: 50\n"
            "max_workers: 3\n"
            "use_default_rules: false\n"
            "rules:\n"
            "  - path: response.data.updatedAt\n"
            "    ignore: true\n"
            "  - path: response.data.meta\n"
            "    severity: informational\n"
        )
        config = load_config(path)

        assert config.engine.max_depth == 50
        assert config.engine.max_workers == 3
        assert config.engine.use_default_rules is False
        assert config.rules[0].ignore is True
        assert config.rules[1].severity == Severity.INFORMATIONAL

    def test_load_json(self, tmp_path):
        """Test JSON is accepted as YAML."""
        path = tmp_path / "snapdiff.json"
        path.write_text(json.dumps({"rules": [{"path": "response.data.x", "ignore": True}]}))
        config = load_config(path)
        assert config.engine.max_depth == 100
        assert config.rules[0].path == "response.data.x"

    def test_empty_file(self, tmp_path):
        """Test an empty file yields defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        config = load_config(path)
        assert config.rules == []
        assert config.engine.use_default_rules is True

    def test_missing_file(self, tmp_path):
        """Test a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_unknown_severity(self):
        """Test unknown severities are rejected at load time."""
        with pytest.raises(ConfigError, match="unknown severity"):
            parse_config({"rules": [{"path": "a", "severity": "fatal"}]})

    def test_rules_must_be_list(self):
        """Test a non-list rules entry is rejected."""
        with pytest.raises(ConfigError):
            parse_config({"rules": {"path": "a"}})

    def test_invalid_yaml(self, tmp_path):
        """Test unparsable YAML raises ConfigError."""
        path = tmp_path / "bad.yaml"
        path.write_text("rules: [unclosed\n")
        with pytest.raises(ConfigError):
            load_config(path)


class TestRunner:
    """Test the dataset folder runner."""

    def write_dataset(self, folder, filename, dataset):
        (folder / filename).write_text(json.dumps(dataset))

    def test_run_folder(self, tmp_path):
        """Test every dataset in the folder is compared."""
        datasets = tmp_path / "datasets"
        datasets.mkdir()
        self.write_dataset(datasets, "01_same.json", {
            "baseline": make_snapshot({"a": 1}),
            "current": make_snapshot({"a": 1}),
        })
        self.write_dataset(datasets, "02_changed.json", {
            "name": "users-list",
            "baseline": make_snapshot({"id": 1}),
            "current": make_snapshot({"id": 2}),
        })
        self.write_dataset(datasets, "03_broken.json", {"baseline": make_snapshot({})})

        config_path = tmp_path / "snapdiff.yaml"
        config_path.write_text("rules:\n  - path: response.data.id\n    severity: non-breaking\n")

        report = SnapDiffRunner.run_folder(str(config_path), str(datasets))

        assert [r.name for r in report.results] == ["01_same", "users-list", "03_broken"]
        assert report.unchanged[0].name == "01_same"
        changed = report.changed[0].comparison
        assert changed.differences[0].severity == Severity.NON_BREAKING
        assert report.failed[0].name == "03_broken"

    def test_defaults_without_config(self, tmp_path):
        """Test the runner works without a config file."""
        datasets = tmp_path / "datasets"
        datasets.mkdir()
        self.write_dataset(datasets, "one.json", {
            "baseline": make_snapshot({"a": 1}),
            "current": make_snapshot({"a": 2}),
        })
        report = SnapDiffRunner(None, str(datasets)).run()
        assert report.total == 1
        assert len(report.changed) == 1

    def test_unreadable_datasets_are_isolated(self, tmp_path):
        """Test invalid JSON and non-object datasets fail alone, in file order."""
        datasets = tmp_path / "datasets"
        datasets.mkdir()
        self.write_dataset(datasets, "01_ok.json", {
            "baseline": make_snapshot({"a": 1}),
            "current": make_snapshot({"a": 2}),
        })
        (datasets / "02_truncated.json").write_text('{"baseline": ')
        self.write_dataset(datasets, "03_array.json", [make_snapshot({}), make_snapshot({})])
        self.write_dataset(datasets, "04_same.json", {
            "baseline": make_snapshot({"a": 1}),
            "current": make_snapshot({"a": 1}),
        })

        report = SnapDiffRunner(None, str(datasets)).run()

        assert [r.name for r in report.results] == ["01_ok", "02_truncated", "03_array", "04_same"]
        assert [r.name for r in report.failed] == ["02_truncated", "03_array"]
        assert report.failed[0].error["code"] == "VALIDATION_ERROR"
        assert report.failed[0].error["details"]["file"] == "02_truncated.json"
        assert report.failed[1].error["details"]["type"] == "list"
        assert [r.name for r in report.changed] == ["01_ok"]
        assert [r.name for r in report.unchanged] == ["04_same"]

    def test_missing_folder(self, tmp_path):
        """Test a missing dataset folder raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            SnapDiffRunner(None, str(tmp_path / "missing")).run()
