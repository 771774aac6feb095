"""Unit tests for rosgen.rendering (file and piped template rendering)."""

from __future__ import annotations

import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from rosgen.exceptions import (
    FileIOError,
    InvalidArgumentError,
    NotFoundError,
    RenderProcessError,
    TemplateError,
)
from rosgen.models.application import Executor
from rosgen.models.records import BuildDescriptor, ExecutorRecord
from rosgen.rendering import TemplateRenderer, dot_escape, render_to_command, render_to_file

# Copies stdin to the file named by argv[1].
_COPY_STDIN = (
    "import sys, pathlib; "
    "pathlib.Path(sys.argv[1]).write_text(sys.stdin.read(), encoding='utf-8')"
)


def _template(tmp_path: Path, text: str, name: str = "t.tmpl") -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# render_to_file
# ---------------------------------------------------------------------------


class TestRenderToFile:
    def test_renders_record_fields(self, tmp_path: Path) -> None:
        template = _template(tmp_path, "project({{ name }}) {{ packages | join(',') }}\n")
        out = tmp_path / "CMakeLists.txt"
        build = BuildDescriptor(name="demo", packages=["rclcpp", "std_msgs"])

        result = render_to_file(build, template, out)

        assert result == out
        assert out.read_text() == "project(demo) rclcpp,std_msgs\n"

    def test_nested_attribute_access(self, tmp_path: Path) -> None:
        template = _template(tmp_path, "{{ index }}:{{ executor.name }}")
        out = tmp_path / "out.cpp"
        record = ExecutorRecord(index=2, executor=Executor(name="planner"))

        render_to_file(record, template, out)

        assert out.read_text() == "2:planner"

    def test_accepts_mapping(self, tmp_path: Path) -> None:
        template = _template(tmp_path, "hello {{ who }}")
        out = tmp_path / "out"
        render_to_file({"who": "world"}, template, out)
        assert out.read_text() == "hello world"

    def test_overwrites_existing_output(self, tmp_path: Path) -> None:
        template = _template(tmp_path, "new")
        out = tmp_path / "out"
        out.write_text("old content that is longer")
        render_to_file({}, template, out)
        assert out.read_text() == "new"

    def test_none_data_rejected(self, tmp_path: Path) -> None:
        template = _template(tmp_path, "x")
        with pytest.raises(InvalidArgumentError, match="None"):
            render_to_file(None, template, tmp_path / "out")

    def test_unsupported_data_rejected(self, tmp_path: Path) -> None:
        template = _template(tmp_path, "x")
        with pytest.raises(InvalidArgumentError, match="record or a mapping"):
            render_to_file(42, template, tmp_path / "out")

    def test_same_path_rejected_before_filesystem(self, tmp_path: Path) -> None:
        template = tmp_path / "missing.tmpl"
        with patch("builtins.open") as mock_open:
            with pytest.raises(InvalidArgumentError, match="same file"):
                render_to_file({}, template, template)
        mock_open.assert_not_called()
        assert not template.exists()

    def test_same_path_after_normalisation(self, tmp_path: Path) -> None:
        template = _template(tmp_path, "x")
        with pytest.raises(InvalidArgumentError):
            render_to_file({}, template, tmp_path / "sub" / ".." / "t.tmpl")
        assert template.read_text() == "x"

    def test_missing_template(self, tmp_path: Path) -> None:
        out = tmp_path / "out"
        with pytest.raises(FileIOError, match="unable to read template"):
            render_to_file({}, tmp_path / "nope.tmpl", out)
        assert not out.exists()

    def test_unwritable_output(self, tmp_path: Path) -> None:
        template = _template(tmp_path, "x")
        with pytest.raises(FileIOError, match="unable to write output"):
            render_to_file({}, template, tmp_path / "no_dir" / "out")

    def test_syntax_error(self, tmp_path: Path) -> None:
        template = _template(tmp_path, "{% for x in %}")
        out = tmp_path / "out"
        with pytest.raises(TemplateError, match="Unable to parse"):
            render_to_file({}, template, out)
        assert not out.exists()

    def test_missing_field_is_template_error(self, tmp_path: Path) -> None:
        template = _template(tmp_path, "{{ name }} {{ not_a_field }}")
        with pytest.raises(TemplateError, match="not_a_field"):
            render_to_file(BuildDescriptor(name="demo"), template, tmp_path / "out")

    def test_data_not_mutated(self, tmp_path: Path) -> None:
        template = _template(tmp_path, "{% for p in packages %}{{ p }}{% endfor %}")
        build = BuildDescriptor(name="demo", packages=["a", "b"])
        before = build.model_dump()
        render_to_file(build, template, tmp_path / "out")
        assert build.model_dump() == before

    def test_trailing_newline_kept(self, tmp_path: Path) -> None:
        template = _template(tmp_path, "line\n")
        out = tmp_path / "out"
        render_to_file({}, template, out)
        assert out.read_text() == "line\n"


# ---------------------------------------------------------------------------
# render_to_command
# ---------------------------------------------------------------------------


class TestRenderToCommand:
    def test_streams_rendered_text_to_stdin(self, tmp_path: Path) -> None:
        template = _template(tmp_path, "digraph { {{ name }} }\n")
        out = tmp_path / "graph.txt"

        render_to_command(
            BuildDescriptor(name="demo"), template, sys.executable, ["-c", _COPY_STDIN, str(out)]
        )

        assert out.read_text() == "digraph { demo }\n"

    def test_large_output_does_not_deadlock(self, tmp_path: Path) -> None:
        # Larger than any OS pipe buffer, so producer and consumer must overlap.
        template = _template(tmp_path, "{% for i in range(count) %}line {{ i }}\n{% endfor %}")
        out = tmp_path / "big.txt"

        render_to_command({"count": 50_000}, template, sys.executable, ["-c", _COPY_STDIN, str(out)])

        lines = out.read_text().splitlines()
        assert len(lines) == 50_000
        assert lines[-1] == "line 49999"

    def test_unknown_command_checked_before_template_read(self, tmp_path: Path) -> None:
        renderer = TemplateRenderer()
        with patch.object(renderer, "load") as mock_load:
            with pytest.raises(NotFoundError, match="definitely-not-a-command"):
                renderer.render_to_command(
                    {}, tmp_path / "missing.dt", "definitely-not-a-command-xyz", []
                )
        mock_load.assert_not_called()

    def test_none_data_rejected(self, tmp_path: Path) -> None:
        template = _template(tmp_path, "x")
        with pytest.raises(InvalidArgumentError):
            render_to_command(None, template, sys.executable, ["-c", "pass"])

    def test_missing_template(self, tmp_path: Path) -> None:
        with pytest.raises(FileIOError):
            render_to_command({}, tmp_path / "nope.dt", sys.executable, ["-c", "pass"])

    def test_nonzero_exit_surfaced(self, tmp_path: Path) -> None:
        template = _template(tmp_path, "data\n")
        script = "import sys; sys.stdin.read(); sys.stderr.write('bad graph'); sys.exit(3)"

        with pytest.raises(RenderProcessError) as excinfo:
            render_to_command({}, template, sys.executable, ["-c", script])

        assert excinfo.value.returncode == 3
        assert "bad graph" in excinfo.value.stderr

    def test_template_error_closes_pipe_and_raises(self, tmp_path: Path) -> None:
        template = _template(tmp_path, "start {{ missing_field }}")
        out = tmp_path / "partial.txt"

        with pytest.raises(TemplateError, match="missing_field"):
            render_to_command({}, template, sys.executable, ["-c", _COPY_STDIN, str(out)])

        # The consumer saw end-of-input and ran to completion.
        assert out.exists()
        assert "missing_field" not in out.read_text()

    def test_consumer_exiting_early(self, tmp_path: Path) -> None:
        template = _template(tmp_path, "{% for i in range(100000) %}xxxxxxxxxx{% endfor %}")
        # Exits successfully without reading its input.
        render_to_command({}, template, sys.executable, ["-c", "pass"])


class TestTemplateRenderer:
    def test_custom_environment(self, tmp_path: Path) -> None:
        from jinja2 import Environment

        template = _template(tmp_path, "{{ missing }}|")
        renderer = TemplateRenderer(Environment())
        out = tmp_path / "out"
        renderer.render_to_file({}, template, out)
        assert out.read_text() == "|"

    def test_load_compiles(self, tmp_path: Path) -> None:
        template = _template(tmp_path, "{{ 1 + 1 }}")
        assert TemplateRenderer().load(template).render() == "2"

    def test_write_failure_is_file_io_error(self, tmp_path: Path) -> None:
        template = _template(tmp_path, "payload\n")
        process = MagicMock()
        process.pid = 4242
        process.stdin.write.side_effect = OSError(5, "Input/output error")
        process.stderr.read.return_value = ""
        process.wait.return_value = 0

        with patch("rosgen.rendering.subprocess.Popen", return_value=process):
            with pytest.raises(FileIOError, match="unable to write to command input") as excinfo:
                render_to_command({}, template, sys.executable, ["-c", "pass"])

        assert isinstance(excinfo.value.__cause__, OSError)
        process.stdin.close.assert_called_once()
        process.wait.assert_called_once()


class TestDotEscape:
    @pytest.mark.parametrize(
        ("raw", "escaped"),
        [
            ("plain", "plain"),
            ('say "hi"', 'say \\"hi\\"'),
            ("two\nlines", "two\\nlines"),
            ("C:\\path", "C:\\\\path"),
            (42, "42"),
        ],
    )
    def test_escapes_quoted_attribute_text(self, raw: object, escaped: str) -> None:
        assert dot_escape(raw) == escaped

    def test_registered_as_filter(self, tmp_path: Path) -> None:
        template = _template(tmp_path, 'label="{{ name | dot_escape }}"')
        out = tmp_path / "out.dot"
        render_to_file({"name": 'a "b"'}, template, out)
        assert out.read_text() == 'label="a \\"b\\""'

    def test_registered_on_custom_environment(self) -> None:
        from jinja2 import Environment

        renderer = TemplateRenderer(Environment())
        assert renderer.environment.filters["dot_escape"] is dot_escape
