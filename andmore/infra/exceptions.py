"""andmore 异常层级体系。

层级树::

    AndmoreError
    ├── ConfigError
    ├── SDKError
    │   ├── SDKNotFoundError
    │   └── ToolError            (同时是 OSError)
    │       ├── ToolLaunchError
    │       ├── ToolOutputError
    │       └── ToolExitError
    └── ProjectError
        ├── TemplateError
        └── ProjectGenerationError
"""

from __future__ import annotations


# ── 基类 ──


class AndmoreError(Exception):
    """所有 andmore 异常的基类。"""


# ── 基础设施异常 ──


class ConfigError(AndmoreError):
    """配置错误（文件缺失、字段非法等）。"""


# ── SDK 异常 ──


class SDKError(AndmoreError):
    """Android SDK 相关错误。"""


class SDKNotFoundError(SDKError):
    """SDK 目录或其中的工具不存在。"""


class ToolError(SDKError, OSError):
    """外部工具（adb / android / gradlew）调用过程中的 IO 错误。"""


class ToolLaunchError(ToolError):
    """子进程启动失败。"""

    def __init__(self, command: list[str], reason: str = "") -> None:
        self.command = list(command)
        msg = f"无法启动命令: {' '.join(self.command)}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class ToolOutputError(ToolError):
    """工具输出格式不符合预期。"""

    def __init__(self, line: str) -> None:
        self.line = line
        super().__init__(f"Unexpected: {line}")


class ToolExitError(ToolError):
    """工具以非零退出码结束。"""

    def __init__(self, returncode: int, last_line: str | None = None) -> None:
        self.returncode = returncode
        self.last_line = last_line
        super().__init__(f"Error {returncode}: {last_line}")


# ── 项目生成异常 ──


class ProjectError(AndmoreError):
    """项目模板生成相关错误。"""


class TemplateError(ProjectError):
    """模板加载或渲染失败。"""

    def __init__(self, template_name: str, reason: str = "") -> None:
        self.template_name = template_name
        msg = f"模板处理失败: {template_name}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class ProjectGenerationError(ProjectError):
    """项目生成失败（参数缺失、文件无法写入等）。"""
