"""新建 Android 应用项目。

流程
----
1. 由项目目录、包名、Activity 名、布局名构造模板模型。
2. 渲染模板目录下的 ``manifest.json`` 得到文件清单。
3. 按清单逐个渲染或复制文件到目标项目。
4. 计算需要在编辑器中打开的文件列表（``show`` 文件排在最后）。
5. 执行 Gradle 初始构建（``generateDebugSources``），生成 R 类等源码。
6. 返回 Java 源码目录列表，供宿主配置 classpath。

使用方式::

    from andmore.project import AppProjectGenerator

    gen = AppProjectGenerator(
        Path("~/workspace/Hello"),
        package_name="com.example.hello",
        sdk=sdk_service,
    )
    result = gen.generate()
    print(result.files_to_open)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger

from andmore.infra import ProjectGenerationError, ProjectConfig
from andmore.sdk import AndroidSDK

from .manifest import FileTemplate, ProjectTemplateManifest
from .template import TemplateGenerator

MANIFEST_NAME = "manifest.json"
# Gradle 生成的 R 类所在目录
GENERATED_SOURCE_DIR = "build/generated/source/r/debug"

_JAVA_IDENTIFIER_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
_RESOURCE_NAME_RE = re.compile(r"[a-z_][a-z0-9_]*")
_JAVA_KEYWORDS = frozenset(
    "abstract assert boolean break byte case catch char class const continue default do "
    "double else enum extends final finally float for goto if implements import instanceof "
    "int interface long native new package private protected public return short static "
    "strictfp super switch synchronized this throw throws transient try void volatile while "
    "true false null".split()
)


def _is_java_identifier(name: str) -> bool:
    return bool(_JAVA_IDENTIFIER_RE.fullmatch(name)) and name not in _JAVA_KEYWORDS


@dataclass
class GenerationResult:
    """项目生成结果。

    Attributes
    ----------
    files:
        按清单顺序生成的文件。
    files_to_open:
        需要打开的文件，``show`` 文件位于最后。
    source_folders:
        Java 源码目录（含 Gradle 生成目录）。
    """

    files: list[Path] = field(default_factory=list)
    files_to_open: list[Path] = field(default_factory=list)
    source_folders: list[Path] = field(default_factory=list)


class AppProjectGenerator:
    """按模板生成空白 Android 应用项目。

    Parameters
    ----------
    project_dir:
        项目根目录，目录名即项目名。清单中 dest 的首段相对于其父目录解析。
    package_name:
        Java 包名，例如 ``"com.example.hello"``。
    activity_name:
        主 Activity 类名。
    layout_name:
        主布局资源名。
    sdk:
        用于执行 Gradle 构建的 SDK 服务。为 None 时跳过构建。
    template_root:
        模板目录。为 None 时使用内置模板。
    run_build:
        是否执行初始构建。
    build_task:
        初始构建执行的 Gradle 任务。
    """

    def __init__(
        self,
        project_dir: str | Path,
        package_name: str,
        activity_name: str = "MainActivity",
        layout_name: str = "activity_main",
        *,
        sdk: AndroidSDK | None = None,
        template_root: str | Path | None = None,
        run_build: bool = True,
        build_task: str = "generateDebugSources",
    ) -> None:
        self.project_dir = Path(project_dir).expanduser().resolve()
        self.package_name = package_name
        self.activity_name = activity_name
        self.layout_name = layout_name
        self._sdk = sdk
        self._generator = TemplateGenerator(template_root)
        self._run_build = run_build
        self._build_task = build_task
        self.model: dict[str, Any] = {}
        self.manifest: ProjectTemplateManifest | None = None

    @classmethod
    def from_config(
        cls,
        config: ProjectConfig,
        project_dir: str | Path,
        package_name: str,
        activity_name: str = "MainActivity",
        layout_name: str = "activity_main",
        sdk: AndroidSDK | None = None,
    ) -> AppProjectGenerator:
        return cls(
            project_dir,
            package_name,
            activity_name,
            layout_name,
            sdk=sdk,
            template_root=config.template_root,
            run_build=config.run_build,
            build_task=config.build_task,
        )

    @property
    def project_name(self) -> str:
        return self.project_dir.name

    @property
    def workspace_root(self) -> Path:
        return self.project_dir.parent

    # ── 主流程 ──

    def generate(self) -> GenerationResult:
        """生成项目。

        Raises
        ------
        ProjectGenerationError
            参数非法，模板文件无法读取，或目标文件无法写入。
        TemplateError
            模板缺失或渲染失败。
        ToolError
            Gradle 构建失败。
        """
        self._validate()
        self.model = self._build_model()

        text = self._generator.render(MANIFEST_NAME, self.model)
        self.manifest = ProjectTemplateManifest.from_json(text, MANIFEST_NAME)
        logger.info(
            "[Project] 生成项目 {}（{} 个文件）", self.project_name, len(self.manifest.files)
        )

        result = GenerationResult()
        self._generate_sources(self.manifest, result)

        if self._run_build:
            if self._sdk is None:
                logger.warning("[Project] 未提供 SDK 服务，跳过 Gradle 初始构建")
            else:
                self._sdk.gradle_build(self.project_dir, self._build_task)

        result.source_folders = self._source_folders(self.manifest)
        logger.info("[Project] 项目 {} 已生成: {}", self.project_name, self.project_dir)
        return result

    # ── 步骤 ──

    def _validate(self) -> None:
        if not self.project_name:
            raise ProjectGenerationError(f"无效的项目目录: {self.project_dir}")
        if not self.package_name:
            raise ProjectGenerationError("未设置包名")
        segments = self.package_name.split(".")
        if not all(_is_java_identifier(s) for s in segments):
            raise ProjectGenerationError(f"非法的 Java 包名: {self.package_name}")
        if not _is_java_identifier(self.activity_name):
            raise ProjectGenerationError(f"非法的 Activity 名: {self.activity_name}")
        if not _RESOURCE_NAME_RE.fullmatch(self.layout_name):
            raise ProjectGenerationError(f"非法的布局名: {self.layout_name}")

    def _build_model(self) -> dict[str, Any]:
        return {
            "projectPath": self.project_dir.as_posix(),
            "projectName": self.project_name,
            "packageName": self.package_name,
            "packagePath": self.package_name.replace(".", "/"),
            "activityName": self.activity_name,
            "layoutName": self.layout_name,
        }

    def _destination(self, file_template: FileTemplate) -> Path:
        dest = self.workspace_root / file_template.project_name / file_template.relative_dest
        if file_template.project_name != self.project_name:
            logger.warning(
                "[Project] {} 的目标项目 {} 与当前项目 {} 不一致",
                file_template.src,
                file_template.project_name,
                self.project_name,
            )
        return dest

    def _generate_sources(
        self, manifest: ProjectTemplateManifest, result: GenerationResult
    ) -> None:
        file_to_show: Path | None = None
        for file_template in manifest.files:
            dest = self._destination(file_template)
            if file_template.skip_template:
                self._generator.copy_file(file_template.src, dest)
            else:
                self._generator.generate_file(file_template.src, self.model, dest)
            result.files.append(dest)

            if file_template.open:
                if file_template.show:
                    # 只保留最后一个 show 文件放到末尾，之前的按顺序打开
                    if file_to_show is not None:
                        result.files_to_open.append(file_to_show)
                    file_to_show = dest
                else:
                    result.files_to_open.append(dest)

        if file_to_show is not None:
            result.files_to_open.append(file_to_show)

    def _source_folders(self, manifest: ProjectTemplateManifest) -> list[Path]:
        folders = [self.project_dir / entry for entry in manifest.src_entries or []]
        folders.append(self.project_dir / GENERATED_SOURCE_DIR)
        return folders
