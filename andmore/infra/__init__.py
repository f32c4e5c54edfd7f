"""基础设施层：日志、配置、异常体系、文件工具。"""

from .config import (
    ConfigManager,
    LogConfig,
    ProjectConfig,
    SDKConfig,
    UserConfig,
)
from .exceptions import (
    AndmoreError,
    ConfigError,
    ProjectError,
    ProjectGenerationError,
    SDKError,
    SDKNotFoundError,
    TemplateError,
    ToolError,
    ToolExitError,
    ToolLaunchError,
    ToolOutputError,
)
from .file_utils import ensure_parent, load_yaml, save_yaml, write_text
from .logger import setup_logger

__all__ = [
    # config
    "ConfigManager",
    "LogConfig",
    "ProjectConfig",
    "SDKConfig",
    "UserConfig",
    # exceptions
    "AndmoreError",
    "ConfigError",
    "ProjectError",
    "ProjectGenerationError",
    "SDKError",
    "SDKNotFoundError",
    "TemplateError",
    "ToolError",
    "ToolExitError",
    "ToolLaunchError",
    "ToolOutputError",
    # file_utils
    "ensure_parent",
    "load_yaml",
    "save_yaml",
    "write_text",
    # logger
    "setup_logger",
]
