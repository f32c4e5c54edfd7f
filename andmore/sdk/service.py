"""Android SDK 命令行工具适配层。

通过子进程调用 SDK 自带的 ``android`` / ``adb`` 工具（以及项目中的
``gradlew``），将其逐行文本输出解析为结构化结果。

每次调用只启动一个子进程。需要单独处理 stderr 的命令会额外启动一个
:class:`ErrorReaper` 线程持续读取 stderr 并转发到控制台，避免子进程因
stderr 缓冲区写满而阻塞；调用方线程同步读取 stdout，返回前等待该线程结束，
保证诊断输出已全部转发。没有超时也没有重试，工具挂起时调用方同样挂起。

退出码统一检查：子进程以非零退出码结束时抛出
:class:`~andmore.infra.exceptions.ToolExitError`。

使用方式::

    from andmore.sdk import AndroidSDKService, StreamConsole, shared_console

    sdk = AndroidSDKService("~/Library/Android/sdk", shared_console(StreamConsole()))
    for serial in sdk.get_devices():
        print(serial, sdk.get_property(serial, "ro.product.model"))
"""

from __future__ import annotations

import shutil
import subprocess
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import IO, cast

from loguru import logger

from andmore.infra import (
    SDKNotFoundError,
    ToolError,
    ToolExitError,
    ToolLaunchError,
    UserConfig,
)
from andmore.types import OSType

from .console import ConsoleFactory, ConsoleService, LoggerConsole, shared_console
from .models import AndroidVirtualDevice
from .parsers import last_line, parse_avd_list, parse_device_list, parse_properties


# ── stderr 转发线程 ──


class ErrorReaper(threading.Thread):
    """后台读取子进程 stderr，逐行转发到控制台。

    控制台在读到第一行时才通过工厂获取并激活。

    Parameters
    ----------
    stream:
        子进程的 stderr 文本流。
    console_factory:
        控制台工厂函数。
    """

    def __init__(self, stream: IO[str], console_factory: ConsoleFactory) -> None:
        super().__init__(name="andmore-error-reaper", daemon=True)
        self._stream = stream
        self._console_factory = console_factory
        self._console: ConsoleService | None = None

    def run(self) -> None:
        try:
            for line in self._stream:
                self._msg(line.rstrip("\r\n") + "\n")
        except (OSError, ValueError) as exc:
            logger.opt(exception=exc).error("[SDK] 转发工具错误输出失败")
        finally:
            self._stream.close()

    def _msg(self, text: str) -> None:
        if self._console is None:
            self._console = self._console_factory()
            self._console.activate()
        self._console.write_error(text)


# ── 子进程封装 ──


class ToolProcess:
    """一次外部工具调用。

    作为上下文管理器使用：正常退出时关闭 stdout、等待 stderr 线程并检查退出码；
    块内抛出异常时直接结束子进程，原异常继续向上传播。

    Parameters
    ----------
    command:
        完整参数列表。
    console_factory:
        stderr 转发所用的控制台工厂。
    merge_stderr:
        ``True`` 时 stderr 合并进 stdout，不启动转发线程。
    cwd:
        子进程工作目录。
    """

    def __init__(
        self,
        command: Sequence[str],
        console_factory: ConsoleFactory,
        *,
        merge_stderr: bool = False,
        cwd: Path | None = None,
    ) -> None:
        self.command = [str(c) for c in command]
        self.last_line: str | None = None
        logger.debug("[SDK] 执行命令: {}", " ".join(self.command))
        try:
            self._proc = subprocess.Popen(
                self.command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT if merge_stderr else subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                cwd=cwd,
            )
        except OSError as exc:
            raise ToolLaunchError(self.command, str(exc)) from exc

        self._reaper: ErrorReaper | None = None
        if not merge_stderr:
            stderr = cast(IO[str], self._proc.stderr)
            self._reaper = ErrorReaper(stderr, console_factory)
            self._reaper.start()

    def lines(self) -> Iterator[str]:
        """逐行读取 stdout（已去除行尾换行符），同时记录最后一行。"""
        stdout = cast(IO[str], self._proc.stdout)
        try:
            for raw in stdout:
                line = raw.rstrip("\r\n")
                self.last_line = line
                yield line
        except OSError as exc:
            raise ToolError(f"读取 {self.command[0]} 输出失败: {exc}") from exc

    def finish(self) -> int:
        """等待子进程结束并检查退出码。

        Raises
        ------
        ToolExitError
            退出码非零。
        """
        self._close()
        rc = self._proc.wait()
        logger.debug("[SDK] 命令结束 rc={}: {}", rc, self.command[0])
        if rc != 0:
            raise ToolExitError(rc, self.last_line)
        return rc

    def abort(self) -> None:
        """结束子进程并回收资源。"""
        if self._proc.poll() is None:
            self._proc.kill()
        self._close()
        self._proc.wait()

    def _close(self) -> None:
        if self._proc.stdout is not None:
            self._proc.stdout.close()
        if self._reaper is not None:
            self._reaper.join()

    def __enter__(self) -> ToolProcess:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.finish()
        else:
            self.abort()


# ── 服务接口 ──


class AndroidSDK(ABC):
    """Android SDK 工具服务接口。"""

    @abstractmethod
    def get_avds(self) -> list[AndroidVirtualDevice]:
        """列出所有 AVD。"""
        ...

    @abstractmethod
    def install_apk(self, apk_path: str | Path) -> None:
        """覆盖安装 APK。"""
        ...

    @abstractmethod
    def start_app(self, package_id: str, activity_id: str) -> None:
        """启动指定 Activity。"""
        ...

    @abstractmethod
    def get_properties(self, device: str) -> dict[str, str]:
        """读取设备的全部系统属性。"""
        ...

    @abstractmethod
    def get_property(self, device: str, key: str) -> str | None:
        """读取设备的单个系统属性。"""
        ...

    @abstractmethod
    def get_devices(self) -> list[str]:
        """列出已连接设备的 serial。"""
        ...

    @abstractmethod
    def gradle_build(self, project_dir: str | Path, task: str) -> None:
        """在项目目录中执行 Gradle wrapper 任务。"""
        ...


# ── 子进程实现 ──


class AndroidSDKService(AndroidSDK):
    """基于 SDK 命令行工具的实现。

    Parameters
    ----------
    sdk_location:
        SDK 根目录，``android`` 位于 ``tools/``，``adb`` 位于 ``platform-tools/``。
    console_factory:
        控制台工厂。为 None 时输出写入 loguru 日志。
    os_type:
        宿主操作系统，决定可执行文件后缀。为 None 时自动检测。
    """

    def __init__(
        self,
        sdk_location: str | Path,
        console_factory: ConsoleFactory | None = None,
        os_type: OSType | None = None,
    ) -> None:
        self._sdk_location = Path(sdk_location).expanduser()
        self._console_factory = console_factory or shared_console(LoggerConsole())
        self._os_type = os_type or OSType.auto()

    @classmethod
    def from_config(
        cls,
        config: UserConfig,
        console_factory: ConsoleFactory | None = None,
    ) -> AndroidSDKService:
        """按用户配置创建服务。"""
        return cls(config.sdk_location, console_factory, config.os_type)

    # ── 路径 ──

    @property
    def sdk_location(self) -> Path:
        return self._sdk_location

    @property
    def android_command(self) -> Path:
        return self._sdk_location / "tools" / f"android{self._os_type.script_suffix}"

    @property
    def adb_command(self) -> Path:
        return self._sdk_location / "platform-tools" / f"adb{self._os_type.exe_suffix}"

    def verify(self) -> None:
        """确认 SDK 目录与 adb 存在。

        Raises
        ------
        SDKNotFoundError
            SDK 目录或 adb 缺失。
        """
        if not self._sdk_location.is_dir():
            raise SDKNotFoundError(f"Android SDK 目录不存在: {self._sdk_location}")
        if not self.adb_command.is_file():
            raise SDKNotFoundError(f"未找到 adb: {self.adb_command}")

    # ── AVD ──

    def get_avds(self) -> list[AndroidVirtualDevice]:
        with self._start([self.android_command, "list", "avd"]) as proc:
            avds = parse_avd_list(proc.lines())
        logger.info("[SDK] 发现 {} 个 AVD", len(avds))
        return avds

    # ── 应用管理 ──

    def install_apk(self, apk_path: str | Path) -> None:
        logger.info("[SDK] 安装 APK: {}", apk_path)
        self._run_command([self.adb_command, "install", "-r", str(apk_path)])

    def start_app(self, package_id: str, activity_id: str) -> None:
        logger.info("[SDK] 启动应用: {}/{}", package_id, activity_id)
        self._run_command(
            [self.adb_command, "shell", "am", "start", "-n", f"{package_id}/{activity_id}"]
        )

    # ── 设备信息 ──

    def get_properties(self, device: str) -> dict[str, str]:
        with self._start(
            [self.adb_command, "-s", device, "shell", "getprop"], merge_stderr=True
        ) as proc:
            props = parse_properties(proc.lines())
        logger.debug("[SDK] {} 共 {} 个属性", device, len(props))
        return props

    def get_property(self, device: str, key: str) -> str | None:
        with self._start(
            [self.adb_command, "-s", device, "shell", "getprop", key], merge_stderr=True
        ) as proc:
            value = last_line(proc.lines())
        logger.debug("[SDK] {} {}={}", device, key, value)
        return value

    def get_devices(self) -> list[str]:
        with self._start([self.adb_command, "devices"], merge_stderr=True) as proc:
            devices = parse_device_list(proc.lines())
        logger.debug("[SDK] 在线设备: {}", devices)
        return devices

    # ── 构建 ──

    def gradle_build(self, project_dir: str | Path, task: str) -> None:
        project_dir = Path(project_dir)
        logger.info("[SDK] Gradle 构建: {} {}", project_dir, task)
        self._run_command([self.gradle_command(project_dir), task], cwd=project_dir)

    def gradle_command(self, project_dir: Path) -> str:
        """优先使用项目自带的 Gradle wrapper，其次是 PATH 中的 ``gradle``。

        Raises
        ------
        ToolLaunchError
            两者都不存在。
        """
        gradlew = project_dir / f"gradlew{self._os_type.script_suffix}"
        if gradlew.is_file():
            return str(gradlew)
        if path := shutil.which("gradle"):
            logger.debug("[SDK] 项目无 Gradle wrapper，使用 {}", path)
            return path
        raise ToolLaunchError([str(gradlew)], "未找到 Gradle wrapper 或 gradle 命令")

    # ── 辅助 ──

    def _start(
        self,
        command: Sequence[str | Path],
        *,
        merge_stderr: bool = False,
        cwd: Path | None = None,
    ) -> ToolProcess:
        return ToolProcess(
            [str(c) for c in command],
            self._console_factory,
            merge_stderr=merge_stderr,
            cwd=cwd,
        )

    def _run_command(self, command: Sequence[str | Path], cwd: Path | None = None) -> None:
        """执行命令，stdout 逐行写入控制台，stderr 交给 ErrorReaper。"""
        console: ConsoleService | None = None
        with self._start(command, cwd=cwd) as proc:
            for line in proc.lines():
                if console is None:
                    console = self._console_factory()
                console.write_output(line)
                console.write_output("\n")
