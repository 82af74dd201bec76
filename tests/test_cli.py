import io
import json
import subprocess
import sys
from pathlib import Path

from csv2json.cli import HELP, main

FIXTURES = Path(__file__).parent / "fixtures"
ROOT = Path(__file__).parent.parent


def run_cli(*argv):
    out, err = io.StringIO(), io.StringIO()
    code = main(list(argv), stdout=out, stderr=err)
    return code, out.getvalue(), err.getvalue()


def test_converts_employees_csv_to_json():
    code, out, err = run_cli(str(FIXTURES / "employees.csv"))
    assert code == 0, err
    assert out.endswith("\n")
    rows = json.loads(out)
    assert rows[0] == {
        "name": "Ada Lovelace",
        "title": "Engineer",
        "department": "R&D",
        "start_date": "2021-03-01",
    }
    assert rows[1]["name"] == "Hopper, Grace"
    assert rows[1]["department"] == 'Navy "Systems"'
    assert rows[2]["start_date"] is None


def test_compact_output_is_a_single_line():
    _, out, _ = run_cli(str(FIXTURES / "employees.csv"))
    assert out.count("\n") == 1
    assert '"start_date":null' in out


def test_pretty_output_is_indented(tmp_path):
    src = tmp_path / "in.csv"
    src.write_text("a,b\n1,2\n", encoding="utf-8")
    code, out, _ = run_cli(str(src), "--pretty")
    assert code == 0
    assert out == '[\n  {\n    "a": "1",\n    "b": "2"\n  }\n]\n'


def test_custom_delimiter_and_output_file(tmp_path):
    src = tmp_path / "in.csv"
    src.write_text("a;b;c\r\n1;2;3\r\n", encoding="utf-8")
    dest = tmp_path / "out.json"
    code, out, err = run_cli(str(src), "-d", ";", "-o", str(dest))
    assert code == 0, err
    assert out == ""
    assert dest.read_text(encoding="utf-8") == '[{"a":"1","b":"2","c":"3"}]\n'


def test_tab_alias(tmp_path):
    src = tmp_path / "in.tsv"
    src.write_text("a\tb\n1\t2\n", encoding="utf-8")
    code, out, _ = run_cli(str(src), "--delimiter", "tab")
    assert code == 0
    assert json.loads(out) == [{"a": "1", "b": "2"}]


def test_utf8_bom_file(tmp_path):
    src = tmp_path / "bom.csv"
    src.write_bytes("a,b\n1,é\n".encode("utf-8-sig"))
    code, out, _ = run_cli(str(src))
    assert code == 0
    assert json.loads(out) == [{"a": "1", "b": "é"}]


def test_no_arguments_prints_help_and_fails():
    code, out, _ = run_cli()
    assert code == 1
    assert out == HELP


def test_help_flag_succeeds():
    for flag in ("-h", "--help"):
        code, out, _ = run_cli(flag)
        assert code == 0
        assert "Usage: csv2json" in out


def test_unknown_option_fails():
    code, out, err = run_cli(str(FIXTURES / "employees.csv"), "--bogus")
    assert code == 1
    assert out == ""
    assert "--bogus" in err


def test_dash_only_and_number_like_tokens_are_unknown_options():
    csv_path = str(FIXTURES / "employees.csv")
    for argv in (["-", csv_path], ["--", csv_path], [csv_path, "-5"]):
        code, out, err = run_cli(*argv)
        assert code == 1, argv
        assert out == ""
        bad = [a for a in argv if a != csv_path][0]
        assert err == f"Error: unknown option: {bad}\n"


def test_option_values_may_start_with_a_dash(tmp_path):
    src = tmp_path / "in.csv"
    src.write_text("a-b\n1-2\n", encoding="utf-8")
    code, out, err = run_cli("-d", "-", str(src))
    assert code == 0, err
    assert json.loads(out) == [{"a": "1", "b": "2"}]


def test_unexpected_failure_is_reported_without_output(tmp_path, monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("parser exploded")

    monkeypatch.setattr("csv2json.cli.parse_csv", explode)
    src = tmp_path / "in.csv"
    src.write_text("a\n1\n", encoding="utf-8")
    dest = tmp_path / "out.json"

    code, out, err = run_cli(str(src), "-o", str(dest))
    assert code == 1
    assert err == "Error: parser exploded\n"
    assert out == ""
    assert not dest.exists()

    code, out, err = run_cli(str(src))
    assert code == 1
    assert err == "Error: parser exploded\n"
    assert out == ""


def test_verbose_logs_go_to_the_given_stream_on_every_run(tmp_path):
    src = tmp_path / "in.csv"
    src.write_text("a,b\n1\n", encoding="utf-8")

    code, out, err = run_cli(str(src), "-v")
    assert code == 0
    assert "DEBUG csv2json.parse: parsed 1 records" in err
    assert json.loads(out) == [{"a": "1", "b": None}]

    code, _, err = run_cli(str(src), "--verbose")
    assert code == 0
    assert "parsed 1 records" in err

    code, _, err = run_cli(str(src))
    assert code == 0
    assert err == ""


def test_abbreviated_option_is_unknown():
    code, _, err = run_cli(str(FIXTURES / "employees.csv"), "--pre")
    assert code == 1
    assert "--pre" in err


def test_missing_input_prints_error_and_help():
    code, out, err = run_cli("--pretty")
    assert code == 1
    assert err.startswith("Error: input file is required")
    assert "Usage: csv2json" in out


def test_missing_file_fails(tmp_path):
    code, out, err = run_cli(str(tmp_path / "nope.csv"))
    assert code == 1
    assert out == ""
    assert err == f"Error: file not found: {tmp_path / 'nope.csv'}\n"


def test_bad_delimiter_fails(tmp_path):
    src = tmp_path / "in.csv"
    src.write_text("a\n1\n", encoding="utf-8")
    code, _, err = run_cli(str(src), "-d", "::")
    assert code == 1
    assert "single character" in err


def test_delimiter_without_value_fails():
    code, _, err = run_cli(str(FIXTURES / "employees.csv"), "-d")
    assert code == 1
    assert err.startswith("Error:")


def test_unwritable_output_leaves_nothing(tmp_path):
    src = tmp_path / "in.csv"
    src.write_text("a\n1\n", encoding="utf-8")
    dest = tmp_path / "missing-dir" / "out.json"
    code, out, err = run_cli(str(src), "-o", str(dest))
    assert code == 1
    assert out == ""
    assert err.startswith("Error: cannot write")
    assert not dest.exists()


def test_directory_as_input_fails(tmp_path):
    code, _, err = run_cli(str(tmp_path))
    assert code == 1
    assert "not a regular file" in err


def test_module_entry_point():
    res = subprocess.run(
        [sys.executable, "-m", "csv2json", str(FIXTURES / "employees.csv")],
        cwd=ROOT,
        capture_output=True,
        text=True,
        encoding="utf-8",
    )
    assert res.returncode == 0, res.stderr
    assert len(json.loads(res.stdout)) == 3
