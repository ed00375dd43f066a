"""Tests for the command-line interface."""

import argparse
import json
import sys
from unittest.mock import patch

import pytest

from solresolve.cli import add_resolve_arguments, main


@pytest.fixture(autouse=True)
def plain_environment(monkeypatch):
    monkeypatch.delenv("NODE_PATH", raising=False)
    monkeypatch.delenv("FORCE_COLOR", raising=False)


@pytest.fixture
def project(tmp_path):
    """Create a project with one library and one broken import."""
    root = tmp_path.resolve()
    (root / "contracts").mkdir()
    (root / "contracts" / "Token.sol").write_text(
        'pragma solidity ^0.5.0;\nimport "./Math.sol";\nimport "lib/L.sol";\n'
    )
    (root / "contracts" / "Math.sol").write_text("library Math {}")
    (root / "contracts" / "Broken.sol").write_text(
        'import "./Math.sol";\nimport "lib/Missing.sol";\nimport "https://x.io/A.sol";\n'
    )
    lib = root / "node_modules" / "lib"
    lib.mkdir(parents=True)
    (lib / "package.json").write_text(json.dumps({"name": "lib", "version": "1.2.3"}))
    (lib / "L.sol").write_text("contract L {}")
    return root


def run_cli(*argv):
    """Run the CLI and return its exit code."""
    with patch.object(sys, "argv", ["solresolve", *argv]):
        with pytest.raises(SystemExit) as exc_info:
            main()
    return exc_info.value.code


class TestCLIHelp:
    """Tests for CLI help and version output."""

    def test_main_help(self):
        assert run_cli("--help") == 0

    def test_main_version(self, capsys):
        assert run_cli("--version") == 0
        assert "solresolve" in capsys.readouterr().out

    def test_resolve_help(self):
        assert run_cli("resolve", "--help") == 0

    def test_imports_help(self):
        assert run_cli("imports", "--help") == 0

    def test_no_command_shows_help(self, capsys):
        assert run_cli() == 0
        assert "resolve" in capsys.readouterr().out


class TestAddResolveArguments:
    """Tests for add_resolve_arguments."""

    def test_defaults(self):
        parser = argparse.ArgumentParser()
        add_resolve_arguments(parser)
        args = parser.parse_args(["contracts/Token.sol"])
        assert args.source_name == "contracts/Token.sol"
        assert args.root == "."
        assert args.output == "text"
        assert not args.compact
        assert not args.debug

    def test_all_options(self):
        parser = argparse.ArgumentParser()
        add_resolve_arguments(parser)
        args = parser.parse_args(
            ["a.sol", "-r", "/p", "-o", "json", "--compact", "--no-color", "--debug"]
        )
        assert args.root == "/p"
        assert args.output == "json"
        assert args.compact and args.no_color and args.debug


class TestResolveCommand:
    """Tests for `solresolve resolve`."""

    def test_text_output(self, project, capsys):
        code = run_cli("resolve", "contracts/Token.sol", "-r", str(project), "--no-color")

        out = capsys.readouterr().out
        assert code == 0
        assert "contracts/Token.sol" in out
        assert str(project / "contracts" / "Token.sol") in out
        assert "(project)" in out
        assert "^0.5.0" in out

    def test_json_output(self, project, capsys):
        code = run_cli("resolve", "lib/L.sol", "-r", str(project), "-o", "json")

        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert data["library"] == {"name": "lib", "version": "1.2.3"}
        assert data["versioned_name"] == "lib/L.sol@v1.2.3"
        assert "raw_content" not in data

    def test_json_content(self, project, capsys):
        run_cli("resolve", "contracts/Math.sol", "-r", str(project), "-o", "json", "--content")
        data = json.loads(capsys.readouterr().out)
        assert data["raw_content"] == "library Math {}"

    def test_compact_json(self, project, capsys):
        run_cli("resolve", "contracts/Math.sol", "-r", str(project), "-o", "json", "--compact")
        out = capsys.readouterr().out.strip()
        assert "\n" not in out
        assert json.loads(out)["source_name"] == "contracts/Math.sol"

    def test_resolution_error(self, project, capsys):
        code = run_cli("resolve", "./contracts/Token.sol", "-r", str(project), "--no-color")

        err = capsys.readouterr().err
        assert code == 1
        assert "[414]" in err
        assert "./contracts/Token.sol" in err

    def test_resolution_error_json(self, project, capsys):
        code = run_cli("resolve", "missing-lib/A.sol", "-r", str(project), "-o", "json")

        data = json.loads(capsys.readouterr().out)
        assert code == 1
        assert data["code"] == 401
        assert data["library"] == "missing-lib"

    def test_bad_root_is_environment_error(self, tmp_path, capsys):
        code = run_cli("resolve", "a.sol", "-r", str(tmp_path / "missing"), "--no-color")

        assert code == 2
        assert "does not exist" in capsys.readouterr().err

    def test_unreadable_file_is_environment_error(self, project, capsys):
        (project / "Binary.sol").write_bytes(b"\xff\xfe")

        code = run_cli("resolve", "Binary.sol", "-r", str(project), "--no-color")

        assert code == 2
        assert "UnicodeDecodeError" in capsys.readouterr().err


class TestImportsCommand:
    """Tests for `solresolve imports`."""

    def test_all_imports_resolve(self, project, capsys):
        code = run_cli("imports", "contracts/Token.sol", "-r", str(project), "--no-color")

        out = capsys.readouterr().out
        assert code == 0
        assert "./Math.sol -> contracts/Math.sol (project)" in out
        assert "lib/L.sol -> lib/L.sol lib@1.2.3" in out

    def test_failing_imports_are_reported(self, project, capsys):
        code = run_cli("imports", "contracts/Broken.sol", "-r", str(project), "--no-color")

        out = capsys.readouterr().out
        assert code == 1
        assert "contracts/Math.sol" in out
        assert "[412]" in out
        assert "[406]" in out

    def test_json_output(self, project, capsys):
        code = run_cli("imports", "contracts/Broken.sol", "-r", str(project), "-o", "json")

        data = json.loads(capsys.readouterr().out)
        assert code == 1
        assert data["source_name"] == "contracts/Broken.sol"
        edges = data["imports"]
        assert edges[0]["source_name"] == "contracts/Math.sol"
        assert edges[1]["error"]["code"] == 412
        assert edges[1]["error"]["importer"] == "contracts/Broken.sol"
        assert edges[2]["error"]["protocol"] == "https"

    def test_file_without_imports(self, project, capsys):
        code = run_cli("imports", "contracts/Math.sol", "-r", str(project), "--no-color")

        assert code == 0
        assert "(no imports)" in capsys.readouterr().out

    def test_unresolvable_file(self, project, capsys):
        code = run_cli("imports", "/abs/A.sol", "-r", str(project), "--no-color")

        assert code == 1
        assert "[413]" in capsys.readouterr().err
