"""全局枚举类型定义。"""

from __future__ import annotations

import os
import sys
from enum import Enum
from pathlib import Path


# ── 枚举基类 ──


class BaseEnum(Enum):
    """提供更友好的报错信息。"""

    @classmethod
    def _missing_(cls, value: object) -> None:
        supported = ", ".join(str(m.value) for m in cls)
        raise ValueError(f'"{value}" 不是合法的 {cls.__name__} 取值。 支持: [{supported}]')


class StrEnum(str, BaseEnum):
    """字符串枚举基类。"""


# ── 系统 / 环境 ──


class OSType(StrEnum):
    """操作系统类型。"""

    windows = "Windows"
    linux = "linux"
    macos = "macOS"

    @classmethod
    def auto(cls) -> OSType:
        """根据当前运行环境自动检测。"""
        if sys.platform.startswith("win"):
            return cls.windows
        if sys.platform == "darwin":
            return cls.macos
        if sys.platform.startswith("linux"):
            return cls.linux
        raise ValueError(f"不支持的操作系统: {sys.platform}")

    def default_sdk_location(self) -> Path:
        """返回 Android Studio 在该系统上默认安装 SDK 的位置。"""
        home = Path.home()
        match self:
            case OSType.windows:
                local = os.environ.get("LOCALAPPDATA")
                base = Path(local) if local else home / "AppData" / "Local"
                return base / "Android" / "Sdk"
            case OSType.macos:
                return home / "Library" / "Android" / "sdk"
            case _:
                return home / "Android" / "Sdk"

    @property
    def script_suffix(self) -> str:
        """可执行脚本后缀（gradlew.bat / adb.exe 等）。"""
        return ".bat" if self == OSType.windows else ""

    @property
    def exe_suffix(self) -> str:
        return ".exe" if self == OSType.windows else ""


class LogLevel(StrEnum):
    """日志级别。"""

    debug = "DEBUG"
    info = "INFO"
    warning = "WARNING"
    error = "ERROR"
    critical = "CRITICAL"
