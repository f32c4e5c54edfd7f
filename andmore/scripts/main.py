"""andmore 命令行入口。

用法
----
列出 AVD / 设备::

    andmore avds
    andmore devices

读取系统属性::

    andmore props emulator-5554
    andmore prop emulator-5554 ro.product.model

安装并启动应用::

    andmore install app/build/outputs/apk/app-debug.apk
    andmore start com.example.hello .MainActivity

新建项目::

    andmore new ~/workspace/Hello --package com.example.hello

导出当前配置::

    andmore --sdk ~/Android/Sdk init-config andmore.yaml
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from loguru import logger

from andmore.infra import AndmoreError, ConfigManager, UserConfig, save_yaml, setup_logger
from andmore.project import AppProjectGenerator
from andmore.sdk import AndroidSDKService, StreamConsole, shared_console


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="andmore", description="Android SDK 命令行助手")
    parser.add_argument("--config", type=Path, default=None, help="YAML 配置文件路径")
    parser.add_argument("--sdk", type=Path, default=None, help="覆盖配置中的 SDK 根目录")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="控制台日志级别",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("avds", help="列出 AVD")
    sub.add_parser("devices", help="列出已连接设备")

    p = sub.add_parser("props", help="读取设备全部系统属性")
    p.add_argument("serial")

    p = sub.add_parser("prop", help="读取设备单个系统属性")
    p.add_argument("serial")
    p.add_argument("key")

    p = sub.add_parser("install", help="覆盖安装 APK")
    p.add_argument("apk", type=Path)

    p = sub.add_parser("start", help="启动 Activity")
    p.add_argument("package")
    p.add_argument("activity")

    p = sub.add_parser("new", help="按模板新建应用项目")
    p.add_argument("project_dir", type=Path)
    p.add_argument("--package", required=True, dest="package_name")
    p.add_argument("--activity", default="MainActivity")
    p.add_argument("--layout", default="activity_main")
    p.add_argument("--no-build", action="store_true", help="跳过 Gradle 初始构建")

    p = sub.add_parser("init-config", help="把当前生效的配置写成 YAML 文件")
    p.add_argument("path", type=Path)

    return parser


def _load_config(args: argparse.Namespace) -> UserConfig:
    config = ConfigManager.load(args.config)
    if args.sdk is not None:
        config = config.model_copy(
            update={"sdk": config.sdk.model_copy(update={"location": args.sdk.expanduser()})}
        )
    return config


def run(args: argparse.Namespace, config: UserConfig) -> None:
    """执行子命令，结果打印到 stdout。"""
    console = StreamConsole()
    sdk = AndroidSDKService.from_config(config, shared_console(console))

    match args.command:
        case "avds":
            for avd in sdk.get_avds():
                print(f"{avd.name}\t{avd.target or ''}\t{avd.abi or ''}")
        case "devices":
            for serial in sdk.get_devices():
                print(serial)
        case "props":
            for key, value in sorted(sdk.get_properties(args.serial).items()):
                print(f"{key}={value}")
        case "prop":
            value = sdk.get_property(args.serial, args.key)
            print(value if value is not None else "")
        case "install":
            sdk.install_apk(args.apk)
        case "start":
            sdk.start_app(args.package, args.activity)
        case "new":
            project_config = config.project
            if args.no_build:
                project_config = project_config.model_copy(update={"run_build": False})
            generator = AppProjectGenerator.from_config(
                project_config,
                args.project_dir,
                args.package_name,
                args.activity,
                args.layout,
                sdk=sdk,
            )
            result = generator.generate()
            for path in result.files_to_open:
                print(path)
        case "init-config":
            data = config.model_dump(mode="json", exclude={"os_type": True, "log": {"dir"}})
            print(save_yaml(data, args.path))


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        config = _load_config(args)
        setup_logger(
            log_dir=config.log.dir if config.log.to_file else None,
            level=args.log_level or config.log.level.value,
        )
        run(args, config)
    except AndmoreError as exc:
        logger.error("{}", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
