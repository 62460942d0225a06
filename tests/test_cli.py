from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

from pydatafile import DataFile, cli
from pydatafile.paths import CONFIG_DIR_ENV


def _run(args: list[str], capsys) -> tuple[int, str, str]:
    code = cli.main(args)
    out, err = capsys.readouterr()
    return code, out, err


def test_cli_set_and_get(tmp_path: Path, capsys) -> None:
    path = tmp_path / "cli.ini"
    code, _, _ = _run(["set", "Port", "1200", "--section", "Server", "--file", str(path)], capsys)
    assert code == 0
    assert path.read_text() == "\n[Server]\nPort=1200\n"
    code, out, _ = _run(["get", "port", "--section", "server", "--as", "int", "--file", str(path)], capsys)
    assert code == 0
    assert out.strip() == "1200"


def test_cli_set_keeps_comment_unless_replaced(sample_file: Path, capsys) -> None:
    assert _run(["set", "Host", "example.org", "--section", "Server", "--file", str(sample_file)], capsys)[0] == 0
    assert DataFile(sample_file).find_key("Host", "Server").comment == "; the host"
    assert _run(["set", "Host", "h", "--section", "Server", "--comment", "; new", "--file", str(sample_file)], capsys)[0] == 0
    assert DataFile(sample_file).find_key("Host", "Server").comment == "; new"


def test_cli_get_missing(sample_file: Path, capsys) -> None:
    code, _, err = _run(["get", "missing", "--file", str(sample_file)], capsys)
    assert code == 1
    assert "not found" in err


def test_cli_get_unparseable(sample_file: Path, capsys) -> None:
    code, _, _ = _run(["get", "Host", "--section", "Server", "--as", "int", "--file", str(sample_file)], capsys)
    assert code == 1


def test_cli_get_missing_file(tmp_path: Path, capsys) -> None:
    code, _, err = _run(["get", "k", "--file", str(tmp_path / "none.ini")], capsys)
    assert code == 2
    assert "no such file" in err


def test_cli_requires_target(capsys) -> None:
    code, _, err = _run(["sections"], capsys)
    assert code == 2
    assert "--file or --app" in err


def test_cli_set_no_create(sample_file: Path, capsys) -> None:
    code, _, _ = _run(["set", "New", "1", "--section", "Server", "--no-create", "--file", str(sample_file)], capsys)
    assert code == 1
    assert not DataFile(sample_file).has_key("New", "Server")
    code, _, _ = _run(["set", "Port", "1", "--section", "Server", "--no-create", "--file", str(sample_file)], capsys)
    assert code == 0
    assert DataFile(sample_file).get_int("Port", "Server") == 1


def test_cli_delete(sample_file: Path, capsys) -> None:
    assert _run(["delete", "Host", "--section", "Server", "--file", str(sample_file)], capsys)[0] == 0
    assert DataFile(sample_file).key_names("Server") == ["Port"]
    assert _run(["delete", "Host", "--section", "Server", "--file", str(sample_file)], capsys)[0] == 1
    assert _run(["delete", "--section", "server", "--file", str(sample_file)], capsys)[0] == 0
    assert not DataFile(sample_file).has_section("Server")
    assert _run(["delete", "--file", str(sample_file)], capsys)[0] == 2


def test_cli_delete_last_key(tmp_path: Path, capsys) -> None:
    path = tmp_path / "last.ini"
    path.write_text("only=1\n")
    code, _, _ = _run(["delete", "only", "--file", str(path)], capsys)
    assert code == 0
    assert path.read_text() == ""
    assert not DataFile(path).has_key("only")


def test_cli_add_section_and_comment(tmp_path: Path, capsys) -> None:
    path = tmp_path / "s.ini"
    assert _run(["add-section", "Alpha", "--comment", "first", "--file", str(path)], capsys)[0] == 0
    assert _run(["add-section", "ALPHA", "--file", str(path)], capsys)[0] == 1
    assert _run(["set", "k", "v", "--section", "Alpha", "--file", str(path)], capsys)[0] == 0
    assert _run(["comment", "k", "--section", "Alpha", "--text", "key note", "--file", str(path)], capsys)[0] == 0
    assert _run(["comment", "--section", "Beta", "--text", "x", "--file", str(path)], capsys)[0] == 1
    doc = DataFile(path)
    assert doc.find_section("Alpha").comment == "; first"
    assert doc.find_key("k", "Alpha").comment == "; key note"


def test_cli_listing(sample_file: Path, capsys) -> None:
    code, out, _ = _run(["sections", "--file", str(sample_file)], capsys)
    assert code == 0
    assert out.split() == ["Server", "UserSettings"]
    code, out, _ = _run(["keys", "--section", "Server", "--file", str(sample_file)], capsys)
    assert out.split() == ["Port", "Host"]
    assert _run(["keys", "--section", "Nope", "--file", str(sample_file)], capsys)[0] == 1


def test_cli_show(sample_file: Path, capsys) -> None:
    code, out, _ = _run(["show", "--as", "json", "--file", str(sample_file)], capsys)
    assert code == 0
    assert json.loads(out)["Server"]["Host"] == "localhost"
    code, out, _ = _run(["show", "--file", str(sample_file)], capsys)
    assert out.startswith("top=1\n")
    assert "[Server]" in out
    code, out, _ = _run(["show", "--as", "toml", "--file", str(sample_file)], capsys)
    assert "[Server]" in out and 'Host = "localhost"' in out


def test_cli_app_settings_file(monkeypatch, tmp_path: Path, capsys) -> None:
    monkeypatch.setenv(CONFIG_DIR_ENV, str(tmp_path))
    assert _run(["set", "color", "blue", "--app", "myapp"], capsys)[0] == 0
    expected = (tmp_path / "myapp" / "settings.ini").resolve()
    assert expected.read_text() == "color=blue\n"
    code, out, _ = _run(["get", "color", "--app", "myapp"], capsys)
    assert (code, out.strip()) == (0, "blue")
    code, out, _ = _run(["paths", "--app", "myapp", "--json"], capsys)
    assert json.loads(out) == {"settings_file": str(expected)}


def test_module_entry_point_help() -> None:
    src = Path(cli.__file__).resolve().parents[1]
    env = {**os.environ, "PYTHONPATH": os.pathsep.join(filter(None, [str(src), os.environ.get("PYTHONPATH")]))}
    proc = subprocess.run(
        [sys.executable, "-m", "pydatafile", "--help"], capture_output=True, text=True, env=env
    )
    assert proc.returncode == 0
    assert "usage: pydatafile" in proc.stdout
