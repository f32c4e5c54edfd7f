"""全局日志配置。

除普通日志外，SDK 工具（adb / android / gradle）转发过来的输出以
``extra["tool"]`` 标记，写文件时单独落到 ``tools.log``，便于事后排查
安装或构建失败。

使用方式::

    # 应用启动时调用一次
    from andmore.infra.logger import setup_logger
    setup_logger(log_dir=Path("log/2026-01-01"))

    # 各模块直接使用 loguru
    from loguru import logger
    logger.info("[SDK] 安装 APK: {}", apk_path)

    # 工具输出
    logger.bind(tool="adb").info("Success")
"""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

# 用于把源文件路径显示为相对路径
_PACKAGE_ROOT = Path(__file__).resolve().parent.parent

_FMT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level:8}</level> | "
    "<cyan>{extra[src]}</cyan> | "
    "{message}"
)
_TOOL_FMT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {extra[tool]:<8} | {level:8} | {message}"


def _patch_record(record: dict) -> None:
    """填充 ``extra["src"]``（``sdk/service.py:120`` 形式），并为工具输出补默认值。"""
    path = Path(record["file"].path)
    try:
        src = path.relative_to(_PACKAGE_ROOT.parent).as_posix()
    except ValueError:
        src = path.name
    record["extra"]["src"] = f"{src}:{record['line']}"
    record["extra"].setdefault("tool", "")


def _is_tool_output(record: dict) -> bool:
    return bool(record["extra"].get("tool"))


def setup_logger(
    log_dir: Path | None = None,
    level: str = "INFO",
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """配置全局 loguru logger。可重复调用，每次都会替换已有 handler。

    - 控制台：按 *level* 过滤。
    - ``andmore_*.debug.log``：DEBUG 全量。
    - ``andmore_*.log``：与控制台级别一致（*level* 为 DEBUG 时不单独生成）。
    - ``tools.log``：仅 SDK 工具输出，不受 *level* 影响。

    Parameters
    ----------
    log_dir:
        日志目录，不存在时自动创建。为 *None* 时只输出到控制台。
    level:
        控制台及过滤文件的最低级别。
    rotation:
        单个日志文件的轮转条件。
    retention:
        日志文件保留时长。
    """
    logger.remove()
    logger.configure(patcher=_patch_record)
    logger.add(sys.stderr, level=level, format=_FMT)

    if log_dir is None:
        return
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    file_opts = {"rotation": rotation, "retention": retention, "encoding": "utf-8"}
    logger.add(
        log_dir / "andmore_{time:YYYY-MM-DD}.debug.log", level="DEBUG", format=_FMT, **file_opts
    )
    if level.upper() != "DEBUG":
        logger.add(log_dir / "andmore_{time:YYYY-MM-DD}.log", level=level, format=_FMT, **file_opts)
    logger.add(
        log_dir / "tools.log",
        level="TRACE",
        format=_TOOL_FMT,
        filter=_is_tool_output,
        **file_opts,
    )
