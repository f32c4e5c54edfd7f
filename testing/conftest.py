"""测试公共 fixtures。"""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from andmore.sdk import ConsoleService


@pytest.fixture
def tmp_yaml(tmp_path: Path):
    """创建临时 YAML 文件的工厂 fixture。"""

    def _factory(name: str, content: str) -> Path:
        p = tmp_path / name
        p.write_text(content, encoding="utf-8")
        return p

    return _factory


class RecordingConsole(ConsoleService):
    """记录全部写入内容的控制台。"""

    def __init__(self) -> None:
        self.outputs: list[str] = []
        self.errors: list[str] = []
        self.activations = 0
        self._lock = threading.Lock()

    def write_output(self, text: str) -> None:
        with self._lock:
            self.outputs.append(text)

    def write_error(self, text: str) -> None:
        with self._lock:
            self.errors.append(text)

    def activate(self) -> None:
        with self._lock:
            self.activations += 1


class CountingFactory:
    """控制台工厂，记录被调用次数。"""

    def __init__(self, console: ConsoleService) -> None:
        self.console = console
        self.calls = 0

    def __call__(self) -> ConsoleService:
        self.calls += 1
        return self.console


@pytest.fixture
def console() -> RecordingConsole:
    return RecordingConsole()


@pytest.fixture
def console_factory(console: RecordingConsole) -> CountingFactory:
    return CountingFactory(console)


def write_tool(
    path: Path,
    stdout: str = "",
    stderr: str = "",
    returncode: int = 0,
    extra: str = "",
) -> Path:
    """生成一个伪造的命令行工具脚本。

    脚本把自身参数追加写入 ``<path>.args``，再按给定内容输出并退出。
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = ["#!/bin/sh", f'echo "$*" >> "{path}.args"']
    if extra:
        lines.append(extra)
    if stdout:
        lines += ["cat <<'__OUT__'", stdout, "__OUT__"]
    if stderr:
        lines += ["cat >&2 <<'__ERR__'", stderr, "__ERR__"]
    lines.append(f"exit {returncode}")
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    path.chmod(0o755)
    return path


class FakeSDK:
    """临时目录中的伪 SDK。"""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)

    @property
    def adb_path(self) -> Path:
        return self.root / "platform-tools" / "adb"

    @property
    def android_path(self) -> Path:
        return self.root / "tools" / "android"

    tool = staticmethod(write_tool)

    def adb(self, **kwargs) -> Path:
        return write_tool(self.adb_path, **kwargs)

    def android(self, **kwargs) -> Path:
        return write_tool(self.android_path, **kwargs)

    @staticmethod
    def calls(tool: Path) -> list[str]:
        """读取脚本记录的参数行。"""
        args_file = Path(f"{tool}.args")
        if not args_file.exists():
            return []
        return args_file.read_text(encoding="utf-8").splitlines()


@pytest.fixture
def fake_sdk(tmp_path: Path) -> FakeSDK:
    return FakeSDK(tmp_path / "sdk")
