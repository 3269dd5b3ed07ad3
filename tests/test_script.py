import ast

import pytest
from click.testing import CliRunner

from calvin.core.errors import UnexpectedState
from calvin.core.script import (
    DOCUMENT_NAME,
    emit,
    load_operations,
    load_script,
    render_script,
    run_script,
    uninstall_script_command,
)
from calvin.models.operation import Operation

from conftest import snapshot, write_files

HEADER = {
    "package": "pkg",
    "version": "Stable_V1.2",
    "target_dir": "/opt/target",
    "generated_at": "2026-01-02T03:04:05",
}

OPERATIONS = [
    Operation.remove("a.m"),
    Operation.move("_backuped_by_pkg_Stable_V1.2_a.m", "a.m", skip_source_check=True),
    Operation.remove("sub"),
]


class TestRenderScript:
    def test_header_summary(self):
        content = render_script(OPERATIONS, HEADER)
        assert content.startswith("#!/usr/bin/env python3\n")
        assert "Uninstalling pkg--Stable_V1.2 from /opt/target..." in content
        assert f"{DOCUMENT_NAME} = (" in content

    def test_script_is_valid_python(self):
        compile(render_script(OPERATIONS, HEADER), "uninstall_pkg.py", "exec")

    def test_awkward_paths_survive(self, tmp_path):
        ops = [Operation.remove("it's '''quoted\".m"), Operation.remove("dir with space/é.m")]
        path = tmp_path / "uninstall_pkg.py"
        emit(ops, path, HEADER)
        assert load_operations(load_script(path)) == ops


class TestEmit:
    def test_writes_loadable_script(self, tmp_path):
        path = tmp_path / "uninstall_pkg.py"
        content = emit(OPERATIONS, path, HEADER)

        assert path.read_text() == content
        data = load_script(path)
        assert data["package"] == "pkg"
        assert data["version"] == "Stable_V1.2"
        assert data["generated_at"] == "2026-01-02T03:04:05"
        assert load_operations(data) == OPERATIONS

    def test_overwrites_previous_script(self, tmp_path):
        path = tmp_path / "uninstall_pkg.py"
        path.write_text("old")
        emit(OPERATIONS[:1], path, HEADER)
        assert load_operations(load_script(path)) == OPERATIONS[:1]

    def test_dry_run_writes_nothing(self, tmp_path):
        path = tmp_path / "uninstall_pkg.py"
        content = emit(OPERATIONS, path, HEADER, dry=True)
        assert "remove" in content
        assert not path.exists()


class TestLoadScript:
    def test_not_a_script(self, tmp_path):
        path = tmp_path / "uninstall_pkg.py"
        path.write_text("print('hello')\n")
        with pytest.raises(UnexpectedState):
            load_script(path)

    def test_syntax_error(self, tmp_path):
        path = tmp_path / "uninstall_pkg.py"
        path.write_text("def (:\n")
        with pytest.raises(UnexpectedState):
            load_script(path)

    def test_unknown_action(self):
        with pytest.raises(UnexpectedState):
            load_operations({"operations": [{"action": "explode", "source": "a.m"}]})


def _document_lines(path):
    tree = ast.parse(path.read_text(encoding="utf-8"))
    for node in tree.body:
        if isinstance(node, ast.Assign) and getattr(node.targets[0], "id", None) == DOCUMENT_NAME:
            return ast.literal_eval(node.value)
    raise AssertionError("no document in script")


class TestScriptCommand:
    def _invoke(self, path, args):
        lines = tuple(_document_lines(path))
        return CliRunner().invoke(uninstall_script_command, args, obj=(path, lines))

    def test_runs_relative_to_script_directory(self, tmp_path):
        write_files(tmp_path, {"a.m": "new", "_backuped_by_pkg_Stable_V1.2_a.m": "old", "sub/b.m": "b"})
        path = tmp_path / "uninstall_pkg.py"
        emit(OPERATIONS, path, HEADER)

        result = self._invoke(path, [])

        assert result.exit_code == 0, result.output
        assert "remove a.m" in result.output
        assert snapshot(tmp_path) == {"a.m": "old"}

    def test_second_run_fails_loudly(self, tmp_path):
        write_files(tmp_path, {"a.m": "new", "sub/b.m": "b"})
        path = tmp_path / "uninstall_pkg.py"
        emit(OPERATIONS, path, HEADER)

        first = self._invoke(path, ["--keep"])
        assert first.exit_code == 0, first.output
        assert path.exists()

        second = self._invoke(path, ["--keep"])
        assert second.exit_code == 1
        assert "does not exist" in second.output

    def test_dry_run(self, tmp_path):
        write_files(tmp_path, {"a.m": "new", "sub/b.m": "b"})
        path = tmp_path / "uninstall_pkg.py"
        emit(OPERATIONS, path, HEADER)
        before = snapshot(tmp_path)

        result = self._invoke(path, ["--dry-run"])

        assert result.exit_code == 0, result.output
        assert snapshot(tmp_path) == before


class TestRunScript:
    def test_runs_in_separate_interpreter(self, tmp_path):
        write_files(tmp_path, {"a.m": "new", "_backuped_by_pkg_Stable_V1.2_a.m": "old", "sub/b.m": "b"})
        path = tmp_path / "uninstall_pkg.py"
        emit(OPERATIONS, path, HEADER)

        trace = run_script(path)

        assert trace == [
            "remove a.m",
            "move _backuped_by_pkg_Stable_V1.2_a.m to a.m",
            "remove sub",
        ]
        assert snapshot(tmp_path) == {"a.m": "old"}

    def test_failure_raises(self, tmp_path):
        path = tmp_path / "uninstall_pkg.py"
        emit([Operation.remove("missing.m")], path, HEADER)

        with pytest.raises(UnexpectedState, match="missing.m"):
            run_script(path)
        assert path.exists()
