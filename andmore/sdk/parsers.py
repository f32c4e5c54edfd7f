"""SDK 工具输出解析。

每种输出格式对应一组行分类规则，解析函数均为作用于行序列的纯函数，
不依赖子进程，便于测试。

- ``android list avd``      → :func:`parse_avd_list`
- ``adb shell getprop``     → :func:`parse_properties`
- ``adb devices``           → :func:`parse_device_list`
- ``adb shell getprop KEY`` → :func:`last_line`
"""

from __future__ import annotations

import enum
import re
from collections.abc import Iterable

from loguru import logger

from andmore.infra import ToolOutputError

from .models import AndroidVirtualDevice

# ── 行文法 ──

AVD_FIELD_RE = re.compile(r"\s*([^\s]+):\s*(.*)")
AVD_SEPARATOR_RE = re.compile(r"--+")
PROPERTY_RE = re.compile(r"\[(.*)\]:\s*\[(.*)\]")
DEVICE_RE = re.compile(r"(.*)\s+(.*)")
DEVICES_HEADER = "List of devices attached"

# AVD 输出键 → AndroidVirtualDevice 字段
AVD_KEYS: dict[str, str] = {
    "Name": "name",
    "Device": "device",
    "Path": "path",
    "Target": "target",
    "Tag/ABI": "abi",
    "Skin": "skin",
}


class AvdLineKind(enum.Enum):
    """``android list avd`` 输出行的类别。"""

    field = "field"
    separator = "separator"
    other = "other"


def classify_avd_line(line: str) -> tuple[AvdLineKind, str, str]:
    """判定一行 AVD 输出的类别。

    Returns
    -------
    tuple[AvdLineKind, str, str]
        ``(类别, 键, 值)``；非字段行的键值为空串。
    """
    m = AVD_FIELD_RE.fullmatch(line)
    if m:
        return AvdLineKind.field, m.group(1), m.group(2)
    if AVD_SEPARATOR_RE.fullmatch(line):
        return AvdLineKind.separator, "", ""
    return AvdLineKind.other, "", ""


class AvdListParser:
    """``android list avd`` 的增量解析器。

    状态只有两个：无记录 / 正在构建记录。字段行在无记录时创建记录，
    分隔行结束当前记录并输出；无记录时遇到分隔行忽略。
    输入结束时仍在构建的记录也会输出。

    使用方式::

        parser = AvdListParser()
        for line in lines:
            parser.feed(line)
        avds = parser.close()
    """

    def __init__(self) -> None:
        self._current: dict[str, str] | None = None
        self._avds: list[AndroidVirtualDevice] = []

    @property
    def building(self) -> bool:
        """当前是否有未完成的记录。"""
        return self._current is not None

    def feed(self, line: str) -> None:
        kind, key, value = classify_avd_line(line)
        if kind is AvdLineKind.field:
            if self._current is None:
                self._current = {}
            attr = AVD_KEYS.get(key)
            if attr is not None:
                self._current[attr] = value
            else:
                logger.trace("[AVD] 忽略未知字段: {}", key)
        elif kind is AvdLineKind.separator:
            self._emit()

    def close(self) -> list[AndroidVirtualDevice]:
        """结束输入，返回全部 AVD。"""
        self._emit()
        return self._avds

    def _emit(self) -> None:
        if self._current is None:
            return
        self._avds.append(AndroidVirtualDevice(**self._current))
        self._current = None


def parse_avd_list(lines: Iterable[str]) -> list[AndroidVirtualDevice]:
    """解析 ``android list avd`` 的全部输出行。"""
    parser = AvdListParser()
    for line in lines:
        parser.feed(line)
    return parser.close()


def parse_property_line(line: str) -> tuple[str, str]:
    """解析 ``[key]: [value]`` 形式的一行。

    Raises
    ------
    ToolOutputError
        行格式不符。
    """
    m = PROPERTY_RE.fullmatch(line)
    if m is None:
        raise ToolOutputError(line)
    return m.group(1), m.group(2)


def parse_properties(lines: Iterable[str]) -> dict[str, str]:
    """解析 ``getprop`` 的全部输出，空行跳过，其余任一行格式不符即失败。"""
    props: dict[str, str] = {}
    for line in lines:
        if not line.strip():
            continue
        key, value = parse_property_line(line)
        props[key] = value
    return props


def parse_device_list(lines: Iterable[str]) -> list[str]:
    """解析 ``adb devices`` 输出，返回 serial 列表。

    跳过表头与空行；其余行必须是 ``serial<空白>status`` 形式。

    调用方会把 stderr 合并进来，因此 adb 服务刚启动时输出的
    ``* daemon not running; starting now at tcp:5037`` 之类提示行同样符合该形式，
    会被当作一条设备返回（serial 为最后一段空白之前的全部文本）。
    需要可靠的设备列表时，先单独执行一次 ``adb start-server``。

    Raises
    ------
    ToolOutputError
        出现无法识别的非空行。
    """
    devices: list[str] = []
    for line in lines:
        if line.startswith(DEVICES_HEADER) or not line.strip():
            continue
        m = DEVICE_RE.fullmatch(line)
        if m is None:
            raise ToolOutputError(line)
        devices.append(m.group(1))
    return devices


def last_line(lines: Iterable[str]) -> str | None:
    """返回最后一行；没有输出时返回 ``None``。"""
    value = None
    for line in lines:
        value = line
    return value
