"""模板渲染：基于 Jinja2。

模板目录中的文件按 Jinja2 语法渲染，模型中缺失的变量会直接报错
（``StrictUndefined``），避免生成带空洞的文件。
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import jinja2
from loguru import logger

from andmore.infra import ProjectGenerationError, TemplateError, ensure_parent, write_text

# 内置模板根目录
TEMPLATES_ROOT = Path(__file__).resolve().parent.parent / "templates"
DEFAULT_TEMPLATE_ROOT = TEMPLATES_ROOT / "app" / "empty"


class TemplateGenerator:
    """在指定模板目录上渲染 / 复制文件。

    Parameters
    ----------
    root:
        模板目录。为 None 时使用内置的 ``app/empty`` 模板。
    """

    def __init__(self, root: str | Path | None = None) -> None:
        self.root = Path(root) if root is not None else DEFAULT_TEMPLATE_ROOT
        self._env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(self.root), encoding="utf-8"),
            undefined=jinja2.StrictUndefined,
            keep_trailing_newline=True,
            autoescape=False,
        )
    def render(self, src: str, model: dict[str, Any]) -> str:
        """渲染模板并返回文本。

        Raises
        ------
        TemplateError
            模板不存在、语法错误或引用了未定义变量。
        ProjectGenerationError
            模板文件存在但无法读取。
        """
        try:
            return self._env.get_template(src).render(model)
        except jinja2.TemplateNotFound as exc:
            raise TemplateError(src, f"模板不存在于 {self.root}") from exc
        except jinja2.TemplateError as exc:
            raise TemplateError(src, str(exc)) from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise ProjectGenerationError(f"无法读取模板文件 {src}: {exc}") from exc

    def create_parent(self, dest: Path) -> Path:
        """创建 *dest* 的父目录。

        Raises
        ------
        ProjectGenerationError
            目录无法创建（例如路径中某一段是普通文件）。
        """
        try:
            return ensure_parent(dest)
        except OSError as exc:
            raise ProjectGenerationError(f"无法创建目录: {Path(dest).parent} ({exc})") from exc

    def generate_file(self, src: str, model: dict[str, Any], dest: Path) -> Path:
        """渲染模板并写入 *dest*（覆盖已有文件）。"""
        content = self.render(src, model)
        self.create_parent(dest)
        try:
            write_text(dest, content)
        except OSError as exc:
            raise ProjectGenerationError(f"写入文件失败: {dest} ({exc})") from exc
        logger.debug("[Template] 已生成 {} → {}", src, dest)
        return dest

    def copy_file(self, src: str, dest: Path) -> Path:
        """将模板目录中的文件按字节原样复制到 *dest*（覆盖已有文件）。

        Raises
        ------
        ProjectGenerationError
            模板文件无法读取，或 *dest* 无法写入。
        """
        try:
            data = (self.root / src).read_bytes()
        except OSError as exc:
            raise ProjectGenerationError(f"无法读取模板文件 {src}: {exc}") from exc
        self.create_parent(dest)
        try:
            Path(dest).write_bytes(data)
        except OSError as exc:
            raise ProjectGenerationError(f"写入文件失败: {dest} ({exc})") from exc
        logger.debug("[Template] 已复制 {} → {}", src, dest)
        return dest
