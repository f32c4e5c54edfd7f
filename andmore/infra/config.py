"""配置管理：基于 Pydantic v2。

配置从 YAML 文件加载，经过 Pydantic 校验后生成不可变的配置对象。

使用方式::

    from andmore.infra.config import ConfigManager

    config = ConfigManager.load("andmore.yaml")
    print(config.sdk.location)
"""

from __future__ import annotations

import datetime
import os
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from andmore.types import LogLevel, OSType

from .exceptions import ConfigError
from .file_utils import load_yaml

# 按优先级检查的 SDK 环境变量
SDK_ENV_VARS: tuple[str, ...] = ("ANDROID_HOME", "ANDROID_SDK_ROOT")


# ── 子配置模型 ──


class SDKConfig(BaseModel):
    """Android SDK 配置。"""

    model_config = {"frozen": True}

    location: Path | None = None
    """SDK 根目录。None = 环境变量或系统默认位置"""

    @field_validator("location", mode="before")
    @classmethod
    def _expand_user(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Path(v).expanduser()
        return v


class LogConfig(BaseModel):
    """日志配置。"""

    model_config = {"frozen": True}

    level: LogLevel = LogLevel.info
    """日志级别"""
    root: Path = Path("log")
    """日志保存根目录"""
    dir: Path | None = None
    """日志保存路径。自动按日期生成"""
    to_file: bool = False
    """是否写入日志文件"""

    @model_validator(mode="after")
    def _set_log_dir(self) -> LogConfig:
        if self.dir is None:
            ts = datetime.datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
            object.__setattr__(self, "dir", self.root / ts)
        return self


class ProjectConfig(BaseModel):
    """新建项目配置。"""

    model_config = {"frozen": True}

    template_root: Path | None = None
    """模板目录。None = 使用内置的 app/empty 模板"""
    run_build: bool = True
    """生成文件后是否执行 Gradle 初始构建"""
    build_task: str = "generateDebugSources"
    """初始构建执行的 Gradle 任务"""


# ── 顶层配置 ──


class UserConfig(BaseModel):
    """用户配置（顶层聚合）。"""

    model_config = {"frozen": True}

    sdk: SDKConfig = Field(default_factory=SDKConfig)
    log: LogConfig = Field(default_factory=LogConfig)
    project: ProjectConfig = Field(default_factory=ProjectConfig)

    os_type: OSType = Field(default_factory=OSType.auto)
    """操作系统类型，自动检测"""

    @model_validator(mode="after")
    def _resolve_sdk_location(self) -> UserConfig:
        """自动填充 SDK 根目录。"""
        if self.sdk.location is not None:
            return self

        location: Path | None = None
        for var in SDK_ENV_VARS:
            value = os.environ.get(var)
            if value:
                location = Path(value).expanduser()
                logger.debug("[Config] 从环境变量 {} 获取 SDK 位置: {}", var, location)
                break
        if location is None:
            location = self.os_type.default_sdk_location()
            logger.debug("[Config] 使用默认 SDK 位置: {}", location)

        object.__setattr__(self, "sdk", self.sdk.model_copy(update={"location": location}))
        return self

    @property
    def sdk_location(self) -> Path:
        """已解析的 SDK 根目录。

        Raises
        ------
        ConfigError
            SDK 位置为空（例如通过 ``model_copy`` 绕过了校验）。
        """
        if self.sdk.location is None:
            raise ConfigError("未能确定 Android SDK 位置")
        return self.sdk.location

    @classmethod
    def from_yaml(cls, path: str | Path) -> UserConfig:
        """从 YAML 文件加载配置。"""
        data = load_yaml(path)
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(f"配置文件 {path} 校验失败:\n{exc}") from exc


# ── ConfigManager ──


class ConfigManager:
    """配置加载入口。"""

    @staticmethod
    def load(path: str | Path | None = None) -> UserConfig:
        """从文件加载用户配置。未指定或不存在时返回默认配置。"""
        if path is None:
            return UserConfig()
        path = Path(path)
        if not path.exists():
            logger.warning("[Config] 配置文件 {} 不存在，使用默认配置", path)
            return UserConfig()
        config = UserConfig.from_yaml(path)
        logger.info("[Config] 已加载配置: {}", path)
        return config
