"""SDK 层：Android SDK 命令行工具调用与输出解析。

提供两大核心能力：

1. **工具调用** (`AndroidSDK` / `AndroidSDKService`)：
   列出 AVD 与设备、安装 APK、启动应用、读取系统属性、执行 Gradle 任务。

2. **输出解析** (`parse_avd_list` / `parse_properties` / `parse_device_list`)：
   与子进程无关的纯函数，按行分类并驱动小型状态机。
"""

from andmore.sdk.console import (
    ConsoleFactory,
    ConsoleService,
    LoggerConsole,
    StreamConsole,
    shared_console,
)
from andmore.sdk.models import AndroidVirtualDevice
from andmore.sdk.parsers import (
    AvdListParser,
    last_line,
    parse_avd_list,
    parse_device_list,
    parse_properties,
)
from andmore.sdk.service import (
    AndroidSDK,
    AndroidSDKService,
    ErrorReaper,
    ToolProcess,
)

__all__ = [
    # console
    "ConsoleFactory",
    "ConsoleService",
    "LoggerConsole",
    "StreamConsole",
    "shared_console",
    # models
    "AndroidVirtualDevice",
    # parsers
    "AvdListParser",
    "last_line",
    "parse_avd_list",
    "parse_device_list",
    "parse_properties",
    # service
    "AndroidSDK",
    "AndroidSDKService",
    "ErrorReaper",
    "ToolProcess",
]
