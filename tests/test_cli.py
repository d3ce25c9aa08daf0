import io
import json

import pytest

import specopt
from specopt import OptionError, ParserExit, cli, const

SPEC = """prog 1.0
Usage: prog [OPTION]... [FILE]...

  -v, --verbose        be chatty
  -n, --dry-run        do nothing
  -u, --name=USER      require an argument
      --version        display version information, then exit
      --help           display this help, then exit
"""


@pytest.fixture(autouse=True)
def logFile(monkeypatch, tmp_path):
    monkeypatch.setattr(const, "LOG_FILE", str(tmp_path / "log" / "specopt.log"))


def _spec(tmp_path) -> str:
    path = tmp_path / "prog.txt"
    path.write_text(SPEC)
    return str(path)


def test_tool_parser():
    tool = specopt.OptionParser(cli.SPEC)
    assert tool.program == const.ARGV0
    assert tool.version == const.VERSION_STR
    assert tool.registry["-g"].handler is tool.optional
    assert tool.registry["--output"].handler is tool.required
    assert tool.registry["--"].handler is tool.finished


def test_run(tmp_path, capsys):
    spec = _spec(tmp_path)
    assert cli.run(["specopt", spec, "--", "-vn", "--name=me", "file.txt"]) == 0
    assert json.loads(capsys.readouterr().out) == {
        "program": "prog",
        "unrecognised": ["file.txt"],
        "opts": {"verbose": True, "dry_run": True, "name": "me"},
    }


def test_run_output(tmp_path):
    spec = _spec(tmp_path)
    out = tmp_path / "out.json"
    assert cli.run(["specopt", "-o", str(out), spec, "--", "-u", "me"]) == 0
    assert json.loads(out.read_text())["opts"] == {"name": "me"}


def test_run_dump(tmp_path, capsys):
    spec = _spec(tmp_path)
    assert cli.run(["specopt", "--dump", spec]) == 0
    table = json.loads(capsys.readouterr().out)
    assert table["program"] == "prog"
    assert [o["key"] for o in table["options"]] == [
        "verbose",
        "dry_run",
        "name",
        "version",
        "help",
    ]


def test_run_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(SPEC))
    assert cli.run(["specopt", "-", "--", "-v"]) == 0
    assert json.loads(capsys.readouterr().out)["opts"] == {"verbose": True}


def test_run_url(tmp_path, monkeypatch, capsys):
    spec = _spec(tmp_path)
    fetched = []

    def wget(url):
        fetched.append(url)
        return spec

    monkeypatch.setattr(cli, "wget", wget)
    assert cli.run(["specopt", "https://example.com/prog.txt", "--", "-n"]) == 0
    assert fetched == ["https://example.com/prog.txt"]
    assert json.loads(capsys.readouterr().out)["opts"] == {"dry_run": True}


def test_wget_downloads_once(tmp_path, monkeypatch):
    monkeypatch.setattr(const, "CACHE_DIR", str(tmp_path / "cache"))
    fetched = []

    class Response:
        text = SPEC

        def raise_for_status(self):
            pass

    def get(url, timeout=None):
        fetched.append(url)
        return Response()

    monkeypatch.setattr("requests.get", get)
    path = cli.wget("https://example.com/prog.txt")
    assert cli.wget("https://example.com/prog.txt") == path
    assert fetched == ["https://example.com/prog.txt"]
    with open(path) as f:
        assert f.read() == SPEC


def test_run_missing_spec(capsys):
    with pytest.raises(OptionError):
        cli.run(["specopt"])
    assert "specopt: error: missing SPECFILE.\n" in capsys.readouterr().err


def test_run_unreadable_spec(tmp_path):
    with pytest.raises(RuntimeError) as e:
        cli.run(["specopt", str(tmp_path / "missing.txt")])
    assert isinstance(e.value.__cause__, OSError)


def test_run_target_help(tmp_path, capsys):
    spec = _spec(tmp_path)
    with pytest.raises(ParserExit) as e:
        cli.run(["specopt", spec, "--", "--help"])
    assert e.value.code == 0
    assert capsys.readouterr().out.startswith("Usage: prog")


def test_run_target_error(tmp_path, capsys):
    spec = _spec(tmp_path)
    with pytest.raises(ParserExit) as e:
        cli.run(["specopt", spec, "--", "--name"])
    assert e.value.code == 2
    assert "prog: error: option '--name' requires an argument." in capsys.readouterr().err


def test_run_version(capsys):
    with pytest.raises(ParserExit):
        cli.run(["specopt", "--version"])
    assert capsys.readouterr().out.startswith(f"specopt {const.VERSION_STR}\n")


def test_argv(monkeypatch):
    monkeypatch.setattr("sys.argv", ["/usr/bin/specopt", "prog.txt"])
    monkeypatch.setenv(const.EXTRA_ARGS_ENV, "-v  --dump")
    assert cli.argv() == ["specopt", "-v", "--dump", "prog.txt"]

    monkeypatch.delenv(const.EXTRA_ARGS_ENV)
    assert cli.argv() == ["specopt", "prog.txt"]


def test_main_error(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr("sys.argv", ["specopt", str(tmp_path / "missing.txt")])
    monkeypatch.delenv(const.EXTRA_ARGS_ENV, raising=False)
    assert specopt.main() == 1
    assert "Could not read spec" in capsys.readouterr().err


def test_lazy_submodule():
    assert specopt.export.table is not None
    with pytest.raises(AttributeError):
        specopt.nonexistent


def test_run_graph(tmp_path, monkeypatch, capsys):
    import graphviz  # type: ignore

    def render(self, filename=None, view=False, **kwargs):
        return f"{filename}.pdf"

    monkeypatch.setattr(graphviz.Digraph, "render", render)
    spec = _spec(tmp_path)
    out = str(tmp_path / "prog.gv")

    assert cli.run(["specopt", spec, f"--graph={out}"]) == 0
    assert capsys.readouterr().out == f"{out}.pdf\n"

    monkeypatch.chdir(tmp_path)
    assert cli.run(["specopt", spec, "-g"]) == 0
    assert capsys.readouterr().out == "prog.gv.pdf\n"
