import argparse
import sys

from toolkit_utils.flagutil import FlagStrings, flag_cmd


def test_flag_cmd():
    assert flag_cmd(["name"]) == ""
    assert flag_cmd(["name", "-flag"]) == ""
    argv = ["name", "cmd", "-x"]
    assert flag_cmd(argv) == "cmd"
    assert argv == ["name", "-x"]


def test_flag_cmd_defaults_to_sys_argv(monkeypatch):
    monkeypatch.setattr(sys, "argv", ["name", "run"])
    assert flag_cmd() == "run"
    assert sys.argv == ["name"]


def test_flag_strings():
    f = FlagStrings()
    parser = argparse.ArgumentParser()
    parser.add_argument("-t", type=f)
    ns = parser.parse_args(["-t", "1", "-t", "2", "-t", "1"])
    assert ns.t is f
    assert f.values == ["1", "2"]
    assert "1" in f
    assert "3" not in f
    assert str(f) == "1,2"


def test_flag_strings_empty_string():
    assert str(FlagStrings()) == ""