"""测试命令行入口。"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from loguru import logger

from andmore.infra import ConfigManager, load_yaml
from andmore.scripts.main import _build_parser, main

pytestmark = pytest.mark.skipif(sys.platform.startswith("win"), reason="依赖 /bin/sh 脚本")


@pytest.fixture(autouse=True)
def no_sdk_env(monkeypatch):
    monkeypatch.delenv("ANDROID_HOME", raising=False)
    monkeypatch.delenv("ANDROID_SDK_ROOT", raising=False)


@pytest.fixture(autouse=True)
def reset_logger():
    # main() 会把 handler 绑定到被 capsys 替换的 stderr 上
    yield
    logger.remove()


class TestParser:
    def test_command_required(self):
        with pytest.raises(SystemExit):
            _build_parser().parse_args([])

    def test_new_defaults(self):
        args = _build_parser().parse_args(["new", "Hello", "--package", "a.b"])
        assert args.project_dir == Path("Hello")
        assert args.package_name == "a.b"
        assert args.activity == "MainActivity"
        assert args.layout == "activity_main"
        assert args.no_build is False


class TestMain:
    def test_devices(self, fake_sdk, capsys):
        fake_sdk.adb(stdout="List of devices attached\nemulator-5554\tdevice\n")
        assert main(["--sdk", str(fake_sdk.root), "devices"]) == 0
        assert capsys.readouterr().out == "emulator-5554\n"

    def test_prop(self, fake_sdk, capsys):
        tool = fake_sdk.adb(stdout="Pixel")
        assert main(["--sdk", str(fake_sdk.root), "prop", "emulator-5554", "ro.product.model"]) == 0
        assert capsys.readouterr().out == "Pixel\n"
        assert fake_sdk.calls(tool) == ["-s emulator-5554 shell getprop ro.product.model"]

    def test_props_sorted(self, fake_sdk, capsys):
        fake_sdk.adb(stdout="[b]: [2]\n[a]: [1]")
        assert main(["--sdk", str(fake_sdk.root), "props", "s"]) == 0
        assert capsys.readouterr().out == "a=1\nb=2\n"

    def test_install_streams_output(self, fake_sdk, capsys):
        fake_sdk.adb(stdout="Success")
        assert main(["--sdk", str(fake_sdk.root), "install", "app.apk"]) == 0
        assert capsys.readouterr().out == "Success\n"

    def test_tool_error_returns_1(self, tmp_path: Path):
        assert main(["--sdk", str(tmp_path / "nope"), "devices"]) == 1

    def test_exit_code_returns_1(self, fake_sdk):
        fake_sdk.adb(stdout="error: no devices/emulators found", returncode=1)
        assert main(["--sdk", str(fake_sdk.root), "start", "a.b", ".Main"]) == 1

    def test_new_without_build(self, fake_sdk, tmp_path: Path, capsys):
        project = tmp_path / "ws" / "Hello"
        code = main(
            ["--sdk", str(fake_sdk.root), "new", str(project), "--package", "com.example.hello", "--no-build"]
        )
        assert code == 0
        printed = capsys.readouterr().out.splitlines()
        assert printed[-1].endswith("MainActivity.java")
        assert (project / "settings.gradle").is_file()

    def test_config_file(self, fake_sdk, tmp_yaml, capsys):
        fake_sdk.adb(stdout="List of devices attached\nserial-1\tdevice\n")
        config = tmp_yaml("andmore.yaml", f"sdk:\n  location: {fake_sdk.root}\n")
        assert main(["--config", str(config), "devices"]) == 0
        assert capsys.readouterr().out == "serial-1\n"

    def test_init_config_round_trip(self, fake_sdk, tmp_path: Path, capsys):
        path = tmp_path / "conf" / "andmore.yaml"
        assert main(["--sdk", str(fake_sdk.root), "init-config", str(path)]) == 0
        assert capsys.readouterr().out.strip() == str(path)

        data = load_yaml(path)
        assert "os_type" not in data
        assert "dir" not in data["log"]
        assert ConfigManager.load(path).sdk_location == fake_sdk.root

    def test_new_into_regular_file_returns_1(self, fake_sdk, tmp_path: Path):
        blocker = tmp_path / "Hello"
        blocker.write_text("", encoding="utf-8")
        code = main(["--sdk", str(fake_sdk.root), "new", str(blocker), "--package", "a.b", "--no-build"])
        assert code == 1
