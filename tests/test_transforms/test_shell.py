"""Tests for assetpipe.transforms.shell module."""

import asyncio

import pytest

from assetpipe.exceptions import TransformError
from assetpipe.transforms.shell import ShellCommand


class TestRender:
    """Tests for ShellCommand.render()."""

    def test_substitution(self):
        cmd = ShellCommand("sass {input} {output}")
        assert cmd.render({"input": "a.scss", "output": "a.css"}) == "sass a.scss a.css"

    def test_values_are_quoted(self):
        """Paths with spaces must stay a single argument."""
        cmd = ShellCommand("cat {input}")
        assert cmd.render({"input": "my file.txt"}) == "cat 'my file.txt'"

    def test_unknown_variable(self):
        cmd = ShellCommand("sass {source}")
        with pytest.raises(TransformError, match="Unknown variable 'source'"):
            cmd.render({"input": "a.scss"})

    @pytest.mark.parametrize("template,enabled", [
        ("sass {input}", True),
        ("", False),
        ("   ", False),
    ])
    def test_enabled(self, template, enabled):
        assert ShellCommand(template).enabled is enabled


class TestRun:
    """Tests for ShellCommand.run()."""

    def test_copy(self, tmp_path):
        source = tmp_path / "in.txt"
        source.write_text("payload")
        dest = tmp_path / "out.txt"

        asyncio.run(ShellCommand("cp {input} {output}").run(input=source, output=dest))

        assert dest.read_text() == "payload"

    def test_stdout_returned(self):
        assert asyncio.run(ShellCommand("echo hello").run()) == "hello\n"

    def test_environment_variables(self, tmp_path):
        out = asyncio.run(ShellCommand('echo "$input"').run(input=tmp_path / "a.scss"))
        assert out.strip() == str(tmp_path / "a.scss")

    def test_cwd(self, tmp_path):
        (tmp_path / "marker.txt").write_text("")
        out = asyncio.run(ShellCommand("ls", cwd=tmp_path).run())
        assert "marker.txt" in out

    def test_non_zero_exit(self):
        cmd = ShellCommand("echo 'Undefined variable' >&2; exit 3")
        with pytest.raises(TransformError) as excinfo:
            asyncio.run(cmd.run())

        error = excinfo.value
        assert "status 3" in str(error)
        assert error.stderr == "Undefined variable"
        assert error.command == "echo 'Undefined variable' >&2; exit 3"

    def test_missing_tool(self):
        with pytest.raises(TransformError):
            asyncio.run(ShellCommand("definitely-not-an-installed-tool {input}").run(input="x"))
