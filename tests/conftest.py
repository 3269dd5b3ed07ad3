import os
from pathlib import Path

import pytest

from calvin.core.config import set_config
from calvin.core.platform import supports_symlinks

requires_symlinks = pytest.mark.skipif(
    not supports_symlinks(), reason="symbolic links not supported on this platform"
)


@pytest.fixture(autouse=True)
def reset_config():
    set_config(None)
    yield
    set_config(None)


def write_files(root: Path, files: dict[str, str]) -> None:
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)


def snapshot(root: Path) -> dict[str, str]:
    """Content and structure of a directory tree, for exact comparisons."""
    result = {}
    for dirpath, dirnames, filenames in os.walk(root):
        for name in dirnames + filenames:
            path = Path(dirpath) / name
            relative = path.relative_to(root).as_posix()
            if path.is_symlink():
                result[relative] = f"-> {os.readlink(path)}"
            elif path.is_dir():
                result[relative] = "<dir>"
            else:
                result[relative] = path.read_bytes().decode("utf-8", errors="replace")
    return result


@pytest.fixture
def make_source(tmp_path):
    """Create a package source directory.

    make_source(version, manifest_lines, files, extras={tag: lines})
    """

    def _make(
        version: str = "1.2.3",
        manifest: list[str] | None = None,
        files: dict[str, str] | None = None,
        extras: dict[str, list[str]] | None = None,
        name: str = "src",
    ) -> Path:
        source = tmp_path / name
        source.mkdir()
        files = files if files is not None else {
            "a.m": "function a()\n",
            "sub/b.m": "function b()\n",
            "sub/data/c.txt": "c\n",
        }
        write_files(source, files)
        if version is not None:
            (source / "VERSION").write_text(version + "\n")
        if manifest is None:
            manifest = ["a.m", "sub"]
        (source / "MANIFEST").write_text("\n".join(manifest) + "\n")
        for tag, lines in (extras or {}).items():
            (source / f"MANIFEST.{tag}").write_text("\n".join(lines) + "\n")
        return source

    return _make


@pytest.fixture
def target(tmp_path):
    path = tmp_path / "target"
    path.mkdir()
    return path
