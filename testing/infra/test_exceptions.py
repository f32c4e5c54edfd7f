"""测试异常体系。"""

import pytest

from andmore.infra.exceptions import (
    AndmoreError,
    SDKError,
    TemplateError,
    ToolError,
    ToolExitError,
    ToolLaunchError,
    ToolOutputError,
)


class TestExceptionHierarchy:
    @pytest.mark.parametrize("cls", [ToolLaunchError, ToolOutputError, ToolExitError])
    def test_tool_errors_are_io_errors(self, cls):
        assert issubclass(cls, ToolError)
        assert issubclass(cls, SDKError)
        assert issubclass(cls, OSError)
        assert issubclass(cls, AndmoreError)


class TestExceptionMessages:
    """测试带参数的异常信息格式。"""

    def test_tool_output_error(self):
        err = ToolOutputError("garbage line")
        assert err.line == "garbage line"
        assert str(err) == "Unexpected: garbage line"

    def test_tool_exit_error(self):
        err = ToolExitError(1, "error: no devices/emulators found")
        assert err.returncode == 1
        assert err.last_line == "error: no devices/emulators found"
        assert str(err) == "Error 1: error: no devices/emulators found"

    def test_tool_exit_error_no_output(self):
        err = ToolExitError(255)
        assert err.last_line is None
        assert "255" in str(err)

    def test_tool_launch_error(self):
        err = ToolLaunchError(["/sdk/platform-tools/adb", "devices"], reason="No such file")
        assert err.command == ["/sdk/platform-tools/adb", "devices"]
        assert "/sdk/platform-tools/adb devices" in str(err)
        assert "No such file" in str(err)

    def test_template_error(self):
        err = TemplateError("manifest.json", reason="模板不存在")
        assert err.template_name == "manifest.json"
        assert "manifest.json" in str(err)
        assert "模板不存在" in str(err)

    def test_template_error_no_reason(self):
        assert "a.java" in str(TemplateError("a.java"))
