"""项目层：基于模板生成 Android 应用项目。"""

from andmore.project.generator import AppProjectGenerator, GenerationResult
from andmore.project.manifest import FileTemplate, ProjectTemplateManifest
from andmore.project.template import DEFAULT_TEMPLATE_ROOT, TemplateGenerator

__all__ = [
    "AppProjectGenerator",
    "DEFAULT_TEMPLATE_ROOT",
    "FileTemplate",
    "GenerationResult",
    "ProjectTemplateManifest",
    "TemplateGenerator",
]
