"""文件读写工具：YAML 配置与生成文件。"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigError


def ensure_parent(path: str | Path) -> Path:
    """创建 *path* 的父目录（已存在时不做任何事），返回 ``Path`` 对象。"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def load_yaml(path: str | Path) -> dict[str, Any]:
    """读取 YAML 映射。

    空文件视为 ``{}``。

    Raises
    ------
    FileNotFoundError
        文件不存在。
    ConfigError
        YAML 语法错误，或顶层不是映射。
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"YAML 文件不存在: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"无法解析 YAML 文件 {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"YAML 文件 {path} 的顶层必须是映射，实际为 {type(data).__name__}")
    return data


def save_yaml(data: dict[str, Any], path: str | Path) -> Path:
    """写出 YAML 映射，保留中文与键顺序。"""
    path = ensure_parent(path)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, allow_unicode=True, sort_keys=False, default_flow_style=False)
    return path


def write_text(path: str | Path, content: str) -> Path:
    """以 UTF-8 写入文本文件（覆盖），必要时创建父目录。"""
    path = ensure_parent(path)
    path.write_text(content, encoding="utf-8")
    return path
