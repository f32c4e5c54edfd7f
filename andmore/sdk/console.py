"""工具输出控制台。

SDK 工具的 stdout / stderr 会逐行转发到 :class:`ConsoleService`。
控制台通过工厂函数延迟获取：只有真正有输出需要写入时才会创建并激活，
没有错误输出的命令不会打扰用户。
"""

from __future__ import annotations

import sys
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TextIO

from loguru import logger


class ConsoleService(ABC):
    """控制台接口。文本按原样写入，换行由调用方负责。"""

    @abstractmethod
    def write_output(self, text: str) -> None:
        """写入普通输出。"""
        ...

    @abstractmethod
    def write_error(self, text: str) -> None:
        """写入错误输出。"""
        ...

    @abstractmethod
    def activate(self) -> None:
        """将控制台切换到前台（对无界面的实现可为空操作）。"""
        ...


ConsoleFactory = Callable[[], ConsoleService]


class LoggerConsole(ConsoleService):
    """将工具输出转写为 loguru 日志的控制台。

    文本先缓冲，遇到换行才输出一条日志，stdout 记为 INFO，stderr 记为 WARNING。
    日志带 ``extra["tool"]`` 标记，写文件时进入 ``tools.log``。
    可被多个线程同时写入。
    """

    def __init__(self, name: str = "sdk") -> None:
        self._name = name
        self._logger = logger.bind(tool=name)
        self._lock = threading.Lock()
        self._buffers: dict[str, str] = {"INFO": "", "WARNING": ""}
        self.active = False

    def write_output(self, text: str) -> None:
        self._write("INFO", text)

    def write_error(self, text: str) -> None:
        self._write("WARNING", text)

    def activate(self) -> None:
        if not self.active:
            self.active = True
            logger.debug("[Console:{}] 已激活", self._name)

    def _write(self, level: str, text: str) -> None:
        with self._lock:
            buf = self._buffers[level] + text
            *lines, rest = buf.split("\n")
            self._buffers[level] = rest
        for line in lines:
            self._logger.log(level, "[{}] {}", self._name, line)


class StreamConsole(ConsoleService):
    """直接写入文本流的控制台（命令行使用）。"""

    def __init__(self, out: TextIO | None = None, err: TextIO | None = None) -> None:
        self._out = out
        self._err = err
        self._lock = threading.Lock()

    def write_output(self, text: str) -> None:
        stream = self._out or sys.stdout
        with self._lock:
            stream.write(text)
            stream.flush()

    def write_error(self, text: str) -> None:
        stream = self._err or sys.stderr
        with self._lock:
            stream.write(text)
            stream.flush()

    def activate(self) -> None:
        pass


def shared_console(console: ConsoleService) -> ConsoleFactory:
    """返回始终给出同一个 *console* 的工厂函数。"""
    return lambda: console
