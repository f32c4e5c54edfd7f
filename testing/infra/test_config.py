"""测试配置系统。"""

from pathlib import Path

import pytest
from loguru import logger

from andmore.infra import ConfigError
from andmore.infra.config import (
    ConfigManager,
    LogConfig,
    ProjectConfig,
    SDKConfig,
    UserConfig,
)
from andmore.types import LogLevel, OSType


@pytest.fixture
def no_sdk_env(monkeypatch):
    monkeypatch.delenv("ANDROID_HOME", raising=False)
    monkeypatch.delenv("ANDROID_SDK_ROOT", raising=False)


# ── SDKConfig ──


class TestSDKConfig:
    def test_expands_user(self):
        cfg = SDKConfig.model_validate({"location": "~/sdk"})
        assert cfg.location == Path.home() / "sdk"

    def test_frozen(self):
        cfg = SDKConfig()
        with pytest.raises(Exception):
            cfg.location = Path("/x")  # type: ignore[misc]


# ── LogConfig ──


class TestLogConfig:
    def test_dir_auto_generated(self):
        cfg = LogConfig()
        assert cfg.dir is not None
        assert str(cfg.root) in str(cfg.dir)

    def test_level_from_string(self):
        assert LogConfig(level="DEBUG").level == LogLevel.debug

    def test_invalid_level(self):
        with pytest.raises(Exception):
            LogConfig(level="VERBOSE")


# ── UserConfig ──


class TestUserConfig:
    def test_explicit_location_kept(self, tmp_path: Path):
        cfg = UserConfig.model_validate({"sdk": {"location": str(tmp_path)}})
        assert cfg.sdk_location == tmp_path

    def test_android_home(self, monkeypatch, no_sdk_env, tmp_path: Path):
        monkeypatch.setenv("ANDROID_HOME", str(tmp_path))
        assert UserConfig().sdk_location == tmp_path

    def test_android_sdk_root(self, monkeypatch, no_sdk_env, tmp_path: Path):
        monkeypatch.setenv("ANDROID_SDK_ROOT", str(tmp_path / "root"))
        assert UserConfig().sdk_location == tmp_path / "root"

    def test_android_home_wins(self, monkeypatch, no_sdk_env, tmp_path: Path):
        monkeypatch.setenv("ANDROID_HOME", str(tmp_path / "home"))
        monkeypatch.setenv("ANDROID_SDK_ROOT", str(tmp_path / "root"))
        assert UserConfig().sdk_location == tmp_path / "home"

    def test_os_default(self, no_sdk_env):
        cfg = UserConfig(os_type=OSType.macos)
        assert cfg.sdk_location == Path.home() / "Library" / "Android" / "sdk"

    def test_project_defaults(self):
        cfg = UserConfig()
        assert cfg.project == ProjectConfig()
        assert cfg.project.run_build is True
        assert cfg.project.build_task == "generateDebugSources"

    def test_from_yaml(self, tmp_yaml):
        content = """\
sdk:
  location: "/opt/android-sdk"
log:
  level: "WARNING"
project:
  run_build: false
"""
        path = tmp_yaml("andmore.yaml", content)
        cfg = UserConfig.from_yaml(path)
        assert cfg.sdk_location == Path("/opt/android-sdk")
        assert cfg.log.level == LogLevel.warning
        assert cfg.project.run_build is False

    def test_from_yaml_invalid(self, tmp_yaml):
        path = tmp_yaml("bad.yaml", "log:\n  level: LOUD\n")
        with pytest.raises(ConfigError, match="bad.yaml"):
            UserConfig.from_yaml(path)


# ── ConfigManager ──


class TestConfigManager:
    def test_load_none(self):
        assert isinstance(ConfigManager.load(), UserConfig)

    def test_load_missing_file(self, tmp_path: Path):
        cfg = ConfigManager.load(tmp_path / "nope.yaml")
        assert cfg.project == ProjectConfig()

    def test_load_file(self, tmp_yaml):
        path = tmp_yaml("c.yaml", "project:\n  build_task: assembleDebug\n")
        assert ConfigManager.load(path).project.build_task == "assembleDebug"

    def test_missing_file_warning_prefixed(self, tmp_path: Path):
        messages: list[str] = []
        handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="WARNING")
        try:
            ConfigManager.load(tmp_path / "nope.yaml")
        finally:
            logger.remove(handler_id)
        assert messages and messages[0].startswith("[Config]")


class TestSdkLocationUnresolved:
    def test_bypassed_validation_raises(self):
        cfg = UserConfig().model_copy(update={"sdk": SDKConfig()})
        with pytest.raises(ConfigError, match="SDK"):
            _ = cfg.sdk_location
