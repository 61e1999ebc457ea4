"""Tests for the command-line harness."""

from __future__ import annotations

import json

import pytest

from sugiyama_trace import cli, config
from sugiyama_trace.layout import LayoutError


class TestMain:
    def test_no_arguments_prints_complex_report(self, capsys):
        assert cli.main([]) == 0
        out = capsys.readouterr().out
        assert "=== Final node positions ===" in out
        assert "=== Nodes by rank (sorted by order) ===" in out
        assert "  rank 0: [A(Input)=0]" in out
        assert "  rank 5: [F(Output)=0]" in out
        assert out.index("Final node positions") < out.index("Nodes by rank")

    def test_every_node_listed_once(self, capsys):
        cli.main([])
        out = capsys.readouterr().out
        position_lines = [line for line in out.splitlines() if ": x=" in line]
        assert [line.split()[0] for line in position_lines] == list("ABCDEFGHI")

    def test_json_format(self, capsys):
        assert cli.main(["--format", "json"]) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["ranks"]["0"] == ["A"]
        assert payload["ranks"]["5"] == ["F"]

    def test_other_example_and_rankdir(self, capsys):
        assert cli.main(["--example", "simple", "--rankdir", "LR", "--format", "json"]) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["rankdir"] == "LR"
        assert payload["ranks"] == {"0": ["A"], "1": ["B"], "2": ["C"]}

    def test_unknown_example_is_usage_error(self):
        with pytest.raises(SystemExit) as excinfo:
            cli.main(["--example", "nope"])
        assert excinfo.value.code == 2

    def test_bad_log_level_in_environment_is_usage_error(self, monkeypatch, capsys):
        monkeypatch.setenv(config.LOG_LEVEL_ENV, "chatty")
        with pytest.raises(SystemExit) as excinfo:
            cli.main([])
        assert excinfo.value.code == 2
        assert "Unknown log level" in capsys.readouterr().err

    def test_debug_order_flag_logs_sweeps(self, capsys, caplog):
        assert cli.main(["--debug-order"]) == 0
        assert "init: crossings=" in caplog.text
        assert "best: crossings=" in caplog.text

    def test_debug_order_from_environment(self, monkeypatch, capsys, caplog):
        monkeypatch.setenv(config.DEBUG_ORDER_ENV, "true")
        assert cli.main([]) == 0
        assert "sweep 0 (down)" in caplog.text

    def test_layout_error_exit_code(self, monkeypatch, capsys, caplog):
        def broken(graph, trace=None):
            raise LayoutError("node 'A' has invalid width")

        monkeypatch.setattr(cli, "layout", broken)
        assert cli.main([]) == 1
        assert capsys.readouterr().out == ""
        assert "layout failed: node 'A' has invalid width" in caplog.text
