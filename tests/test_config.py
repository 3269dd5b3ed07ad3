from pathlib import Path

from calvin.core.config import CalvinConfig, get_config, set_config
from calvin.core.platform import PlatformInfo, supports_symlinks
from calvin.models.operation import Action, Operation


class TestConfig:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("CALVIN_MODE", raising=False)
        config = CalvinConfig.default()
        assert config.version_filename == "VERSION"
        assert config.manifest_filename == "MANIFEST"
        assert config.default_mode == "copy"
        assert config.script_name("pkg") == "uninstall_pkg.py"
        assert config.backup_prefix("pkg", "1.0") == "_backuped_by_pkg_1.0_"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("CALVIN_MODE", "link")
        monkeypatch.setenv("CALVIN_LOG_LEVEL", "debug")
        config = CalvinConfig.default()
        assert config.default_mode == "link"
        assert config.log_level == "DEBUG"

    def test_script_path(self, tmp_path):
        assert get_config().script_path("pkg", tmp_path) == tmp_path / "uninstall_pkg.py"

    def test_set_config(self):
        custom = CalvinConfig.default()
        custom.script_template = "remove_{name}.py"
        set_config(custom)
        assert get_config().script_name("pkg") == "remove_pkg.py"


class TestPlatform:
    def test_windows_has_no_symlinks(self, monkeypatch):
        monkeypatch.setattr("platform.system", lambda: "Windows")
        info = PlatformInfo.detect()
        assert info.os == "windows"
        assert info.symlinks is False

    def test_linux_has_symlinks(self, monkeypatch):
        monkeypatch.setattr("platform.system", lambda: "Linux")
        assert PlatformInfo.detect().symlinks is True

    def test_capability_query(self, monkeypatch):
        monkeypatch.setattr("platform.system", lambda: "Windows")
        assert supports_symlinks() is False


class TestOperation:
    def test_dict_round_trip_keeps_flags(self):
        op = Operation.move("_bak_a.m", "a.m", skip_source_check=True)
        data = op.to_dict()
        assert data == {
            "action": "move",
            "source": "_bak_a.m",
            "destination": "a.m",
            "skip_source_check": True,
        }
        assert Operation.from_dict(data) == op

    def test_remove_has_no_destination(self):
        op = Operation.remove(Path("sub") / "a.m")
        assert op.action == Action.REMOVE
        assert op.destination is None
        assert "destination" not in op.to_dict()
