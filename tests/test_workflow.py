"""Tests for ktmpl.workflow.render_manifest: value gathering and the runner.

Tests cover:
1. Exit code constants
2. gather_values source precedence
3. read_template from file and stdin
4. run_render_workflow success, template errors and input errors
5. Module exports
"""

from __future__ import annotations

import io
import textwrap

import pytest

from ktmpl.config.models import ENV_USE_ENV, RenderOptions
from ktmpl.parameters.models import Encoded, Plain
from ktmpl.workflow.render_manifest import (
    EXIT_INPUT_ERROR,
    EXIT_SUCCESS,
    EXIT_TEMPLATE_ERROR,
    gather_values,
    read_template,
    render,
    run_render_workflow,
    write_output,
)

TEMPLATE = textwrap.dedent(
    """\
    kind: Template
    apiVersion: v1
    metadata:
      name: mongo
    objects:
      - kind: Service
        apiVersion: v1
        metadata:
          name: "$(DATABASE_SERVICE_NAME)"
        spec:
          ports:
            - port: "$((PORT))"
      - kind: Secret
        apiVersion: v1
        metadata:
          name: mongo
        data:
          password: "$(PASSWORD)"
    parameters:
      - name: DATABASE_SERVICE_NAME
        required: true
      - name: PORT
        value: 27017
      - name: PASSWORD
        value: foo
    """
)


@pytest.fixture(autouse=True)
def _no_env_toggle(monkeypatch):
    monkeypatch.delenv(ENV_USE_ENV, raising=False)


@pytest.fixture
def template_file(tmp_path):
    path = tmp_path / "template.yaml"
    path.write_text(TEMPLATE, encoding="utf-8")
    return path


# ── Exit code constants ─────────────────────────────────────────────────


class TestExitCodes:
    def test_exit_success(self):
        assert EXIT_SUCCESS == 0

    def test_exit_template_error(self):
        assert EXIT_TEMPLATE_ERROR == 1

    def test_exit_input_error(self):
        assert EXIT_INPUT_ERROR == 2


# ── gather_values ───────────────────────────────────────────────────────


class TestGatherValues:
    def test_cli_pairs(self):
        opts = RenderOptions(template="t", parameters=["A=1"], base64_parameters=["B=Zm9v"])
        assert gather_values(opts) == {"A": Plain("1"), "B": Encoded("Zm9v")}

    def test_env_ignored_by_default(self):
        opts = RenderOptions(template="t")
        assert gather_values(opts, environ={"A": "env"}) == {}

    def test_env_used_when_requested(self):
        opts = RenderOptions(template="t", use_env=True)
        assert gather_values(opts, environ={"A": "env"}) == {"A": Plain("env")}

    def test_env_toggle(self, monkeypatch):
        monkeypatch.setenv(ENV_USE_ENV, "1")
        opts = RenderOptions(template="t")
        assert gather_values(opts, environ={"A": "env"}) == {"A": Plain("env")}

    def test_precedence(self, tmp_path):
        first = tmp_path / "first.yaml"
        first.write_text("A: file1\nB: file1\nC: file1\n", encoding="utf-8")
        second = tmp_path / "second.yaml"
        second.write_text("B: file2\nC: file2\n", encoding="utf-8")
        opts = RenderOptions(
            template="t",
            use_env=True,
            parameter_files=[str(first), str(second)],
            parameters=["C=cli"],
            base64_parameters=["D=Zm9v"],
        )
        values = gather_values(opts, environ={"A": "env", "D": "env", "E": "env"})
        assert values == {
            "A": Plain("file1"),
            "B": Plain("file2"),
            "C": Plain("cli"),
            "D": Encoded("Zm9v"),
            "E": Plain("env"),
        }


# ── read_template / write_output ────────────────────────────────────────


class TestReadTemplate:
    def test_from_file(self, template_file):
        assert read_template(RenderOptions(template=str(template_file))) == TEMPLATE

    def test_from_stdin(self):
        opts = RenderOptions(template="-")
        assert read_template(opts, stdin=io.StringIO("x: 1\n")) == "x: 1\n"

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            read_template(RenderOptions(template=str(tmp_path / "missing.yaml")))

    def test_not_utf8(self, tmp_path):
        path = tmp_path / "template.yaml"
        path.write_bytes(b"\xff\xfe")
        with pytest.raises(UnicodeDecodeError):
            read_template(RenderOptions(template=str(path)))


class TestWriteOutput:
    def test_stdout_gets_trailing_newline(self):
        out = io.StringIO()
        write_output("a: 1", RenderOptions(template="t"), stdout=out)
        assert out.getvalue() == "a: 1\n"

    def test_output_file(self, tmp_path):
        dest = tmp_path / "out.yaml"
        write_output("a: 1\n", RenderOptions(template="t", output=str(dest)))
        assert dest.read_text(encoding="utf-8") == "a: 1\n"


# ── render / run_render_workflow ────────────────────────────────────────


class TestRender:
    def test_markers_by_default(self, template_file):
        opts = RenderOptions(
            template=str(template_file), parameters=["DATABASE_SERVICE_NAME=mongo"]
        )
        text = render(opts)
        assert text.startswith("---\napiVersion: v1\nkind: Service\n")
        assert "\n\n---\napiVersion: v1\n" in text
        assert "- port: 27017\n" in text

    def test_secrets_encoded(self, template_file):
        opts = RenderOptions(
            template=str(template_file),
            parameters=["DATABASE_SERVICE_NAME=mongo"],
            secrets=["mongo"],
            document_markers=False,
        )
        assert "password: Zm9v\n" in render(opts)


class TestRunRenderWorkflow:
    def test_success_to_stdout(self, template_file):
        out = io.StringIO()
        opts = RenderOptions(
            template=str(template_file),
            parameters=["DATABASE_SERVICE_NAME=mongo"],
            document_markers=False,
        )
        assert run_render_workflow(opts, stdout=out) == EXIT_SUCCESS
        assert "name: mongo\n" in out.getvalue()
        assert "$(" not in out.getvalue()

    def test_success_from_stdin(self):
        out = io.StringIO()
        opts = RenderOptions(template="-", parameters=["DATABASE_SERVICE_NAME=db"])
        rc = run_render_workflow(opts, stdin=io.StringIO(TEMPLATE), stdout=out)
        assert rc == EXIT_SUCCESS
        assert "name: db\n" in out.getvalue()

    def test_success_to_file(self, template_file, tmp_path):
        dest = tmp_path / "manifests.yaml"
        opts = RenderOptions(
            template=str(template_file),
            parameters=["DATABASE_SERVICE_NAME=mongo"],
            output=str(dest),
        )
        assert run_render_workflow(opts) == EXIT_SUCCESS
        assert "kind: Secret" in dest.read_text(encoding="utf-8")

    def test_missing_required_parameter(self, template_file):
        out = io.StringIO()
        opts = RenderOptions(template=str(template_file))
        assert run_render_workflow(opts, stdout=out) == EXIT_TEMPLATE_ERROR
        assert out.getvalue() == ""

    def test_missing_secret(self, template_file):
        out = io.StringIO()
        opts = RenderOptions(
            template=str(template_file),
            parameters=["DATABASE_SERVICE_NAME=mongo"],
            secrets=["absent=prod"],
        )
        assert run_render_workflow(opts, stdout=out) == EXIT_TEMPLATE_ERROR
        assert out.getvalue() == ""

    def test_bad_parameter_pair(self, template_file):
        opts = RenderOptions(template=str(template_file), parameters=["NOEQUALS"])
        assert run_render_workflow(opts, stdout=io.StringIO()) == EXIT_TEMPLATE_ERROR

    def test_unreadable_template(self, tmp_path):
        opts = RenderOptions(template=str(tmp_path / "missing.yaml"))
        assert run_render_workflow(opts, stdout=io.StringIO()) == EXIT_INPUT_ERROR

    def test_template_not_utf8(self, tmp_path):
        path = tmp_path / "template.yaml"
        path.write_bytes(b"\xff\xfe")
        opts = RenderOptions(template=str(path))
        assert run_render_workflow(opts, stdout=io.StringIO()) == EXIT_INPUT_ERROR

    def test_parameter_file_not_utf8(self, template_file, tmp_path):
        params = tmp_path / "params.yaml"
        params.write_bytes(b"DATABASE_SERVICE_NAME: \xff\n")
        out = io.StringIO()
        opts = RenderOptions(template=str(template_file), parameter_files=[str(params)])
        assert run_render_workflow(opts, stdout=out) == EXIT_TEMPLATE_ERROR
        assert out.getvalue() == ""

    def test_unwritable_output(self, template_file, tmp_path):
        opts = RenderOptions(
            template=str(template_file),
            parameters=["DATABASE_SERVICE_NAME=mongo"],
            output=str(tmp_path / "no-such-dir" / "out.yaml"),
        )
        assert run_render_workflow(opts) == EXIT_INPUT_ERROR


# ── Module exports ──────────────────────────────────────────────────────


class TestModuleExports:
    def test_workflow_package_exports(self):
        import ktmpl.workflow as wf

        for name in wf.__all__:
            assert hasattr(wf, name)

    def test_top_level_exports(self):
        import ktmpl

        assert ktmpl.Template is not None
        assert ktmpl.TemplateError.__mro__[1] is ValueError
        for name in ktmpl.__all__:
            assert hasattr(ktmpl, name)
