"""项目模板清单（``manifest.json``）模型。

清单本身也是模板：先经 :class:`~andmore.project.template.TemplateGenerator`
渲染，再交给 Pydantic 校验。

示例::

    {
      "files": [
        {"src": "MainActivity.java",
         "dest": "{{ projectName }}/app/src/main/java/{{ packagePath }}/{{ activityName }}.java",
         "open": true, "show": true},
        {"src": "gitignore", "dest": "{{ projectName }}/.gitignore", "skipTemplate": true}
      ],
      "srcEntries": ["app/src/main/java"]
    }
"""

from __future__ import annotations

from pathlib import PurePosixPath

from pydantic import BaseModel, Field, ValidationError, field_validator

from andmore.infra import TemplateError


class FileTemplate(BaseModel):
    """清单中的单个文件映射。"""

    model_config = {"frozen": True, "populate_by_name": True}

    src: str
    """模板目录内的源文件"""
    dest: str
    """目标路径，首段为项目名"""
    skip_template: bool = Field(default=False, alias="skipTemplate")
    """True = 原样复制，不做渲染"""
    open: bool = False
    """生成后是否在编辑器中打开"""
    show: bool = False
    """是否作为最终置前显示的文件（需同时 open）"""

    @field_validator("dest")
    @classmethod
    def _validate_dest(cls, v: str) -> str:
        parts = PurePosixPath(v).parts
        if len(parts) < 2:
            raise ValueError(f"dest 必须以项目名开头并包含文件路径: {v!r}")
        if PurePosixPath(v).is_absolute() or ".." in parts:
            raise ValueError(f"dest 不能是绝对路径或包含 '..': {v!r}")
        return v

    @property
    def project_name(self) -> str:
        """dest 的首段。"""
        return PurePosixPath(self.dest).parts[0]

    @property
    def relative_dest(self) -> PurePosixPath:
        """去掉项目名后的相对路径。"""
        return PurePosixPath(*PurePosixPath(self.dest).parts[1:])


class ProjectTemplateManifest(BaseModel):
    """模板清单。"""

    model_config = {"frozen": True, "populate_by_name": True}

    files: list[FileTemplate] = Field(default_factory=list)
    src_entries: list[str] | None = Field(default=None, alias="srcEntries")
    """Java 源码目录（相对项目根目录）"""

    @classmethod
    def from_json(cls, text: str, name: str = "manifest.json") -> ProjectTemplateManifest:
        """解析渲染后的清单文本。

        Raises
        ------
        TemplateError
            JSON 非法或字段校验失败。
        """
        try:
            return cls.model_validate_json(text)
        except ValidationError as exc:
            raise TemplateError(name, str(exc)) from exc
