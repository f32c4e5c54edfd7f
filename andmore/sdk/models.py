"""SDK 层数据模型。"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AndroidVirtualDevice:
    """``android list avd`` 输出中的一个 AVD 条目。

    未出现在输出中的字段保持 ``None``。

    Attributes
    ----------
    name:
        AVD 名称。
    device:
        设备配置（如 ``"Nexus 5X (Google)"``）。
    path:
        AVD 数据目录。
    target:
        目标平台描述。
    abi:
        ``Tag/ABI`` 字段，例如 ``"google_apis/x86"``。
    skin:
        皮肤标识（如 ``"1080x1920"``）。
    """

    name: str | None = None
    device: str | None = None
    path: str | None = None
    target: str | None = None
    abi: str | None = None
    skin: str | None = None
