import json

import pytest

from vm_health import cli
from vm_health.system_state import Sample

NORMAL = Sample(cpu_percent=23.4, mem_percent=61.2, disk_percent=54)


@pytest.fixture
def collected(monkeypatch):
    """Stub metric collection and record how often it runs."""
    calls = []

    def fake_gather_sample():
        calls.append(1)
        return NORMAL

    monkeypatch.setattr(cli, "gather_sample", fake_gather_sample)
    monkeypatch.setattr(cli.platform, "system", lambda: "Linux")
    return calls


@pytest.mark.parametrize("flag", ["--help", "-h"])
def test_help_skips_collection(collected, capsys, flag):
    assert cli.main([flag]) == 0
    assert collected == []
    assert "用法" in capsys.readouterr().out


def test_help_wins_over_other_arguments(collected):
    assert cli.main(["foo", "-h"]) == 0
    assert collected == []


@pytest.mark.parametrize("argv", [["foo"], ["--verbose"], ["--js"], ["explain", "--json"], ["explain", "extra"]])
def test_unknown_argument(collected, capsys, argv):
    assert cli.main(argv) == 1
    out = capsys.readouterr().out
    assert "未知参数：" in out
    assert "用法" in out
    assert collected == []


def test_unknown_argument_names_offender(collected, capsys):
    cli.main(["foo"])
    assert capsys.readouterr().out.splitlines()[0] == "未知参数：foo"


def test_json_mode(collected, capsys):
    assert cli.main(["--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["os"] == "Linux"
    assert payload["overall"] == "healthy"
    assert payload["reasons"] == "无明显异常"
    assert collected == [1]


def test_explain_mode(collected, capsys):
    assert cli.main(["explain"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert "CPU: 23.4%" in lines
    assert "内存: 61.2%" in lines
    assert "磁盘: 54%" in lines
    assert "结论: healthy" in lines


@pytest.mark.parametrize("answer", ["", "y", "Y", "yes", "whatever"])
def test_interactive_shows_explanation_unless_declined(collected, capsys, monkeypatch, answer):
    monkeypatch.setattr("builtins.input", lambda *args: answer)
    assert cli.main([]) == 0
    out = capsys.readouterr().out
    assert "CPU: 23.4% | MEM: 61.2% | DISK: 54% | 结论: healthy" in out
    assert "需要详细解释吗？(Y/n)" in out
    assert "===== VM 健康报告 =====" in out


@pytest.mark.parametrize("answer", ["n", "N", "no", " No "])
def test_interactive_declined(collected, capsys, monkeypatch, answer):
    monkeypatch.setattr("builtins.input", lambda *args: answer)
    assert cli.main([]) == 0
    out = capsys.readouterr().out
    assert "== VM 快速体检 ==" in out
    assert "VM 健康报告" not in out


def test_interactive_end_of_input_uses_default(collected, capsys, monkeypatch):
    def closed_stdin(*args):
        raise EOFError

    monkeypatch.setattr("builtins.input", closed_stdin)
    assert cli.main([]) == 0
    assert "===== VM 健康报告 =====" in capsys.readouterr().out


def test_interactive_explanation_is_not_wrapped(monkeypatch, capsys):
    overloaded = Sample(cpu_percent=100.0, mem_percent=100.0, disk_percent=100)
    monkeypatch.setattr(cli, "gather_sample", lambda: overloaded)
    monkeypatch.setattr("builtins.input", lambda *args: "y")
    assert cli.main([]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert "原因: CPU使用率过高（100.0%） 内存占用过高（100.0%） 磁盘空间几乎耗尽（100% 已用）" in lines
    assert lines[-1] == "======================"


@pytest.mark.parametrize("argv, offender", [(["--json=1"], "--json=1"), (["explain", "--json=yes"], "--json=yes")])
def test_unknown_argument_reports_raw_token(collected, capsys, argv, offender):
    assert cli.main(argv) == 1
    assert capsys.readouterr().out.splitlines()[0] == f"未知参数：{offender}"
    assert collected == []


def test_help_wins_over_malformed_flag(collected):
    assert cli.main(["--json=1", "--help"]) == 0
    assert collected == []


def test_empty_argument_runs_interactive(collected, capsys, monkeypatch):
    monkeypatch.setattr("builtins.input", lambda *args: "n")
    assert cli.main([""]) == 0
    assert "== VM 快速体检 ==" in capsys.readouterr().out
    assert collected == [1]
