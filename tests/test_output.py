"""Tests for output formatting."""

import io
import json

import pytest
from rich.console import Console

from envmigrate.output import OutputContext


def make_ctx(json_mode: bool = False) -> tuple[OutputContext, io.StringIO]:
    output = io.StringIO()
    console = Console(file=output, force_terminal=False, width=120)
    return OutputContext(console=console, json_mode=json_mode), output


class TestOutputContext:
    """Tests for OutputContext."""

    def test_print_in_normal_mode(self) -> None:
        ctx, output = make_ctx()
        ctx.print("Hello world")
        assert "Hello world" in output.getvalue()

    def test_print_suppressed_in_json_mode(self) -> None:
        ctx, output = make_ctx(json_mode=True)
        ctx.print("Hello world")
        assert output.getvalue() == ""

    def test_table_renders_rows(self) -> None:
        ctx, output = make_ctx()
        ctx.table("Migrations", ["Version", "File"], [("1", "1.js"), ("10", "10.js")])
        text = output.getvalue()
        assert "Migrations" in text
        assert "10.js" in text

    def test_table_suppressed_in_json_mode(self) -> None:
        ctx, output = make_ctx(json_mode=True)
        ctx.table("Migrations", ["Version"], [("1",)])
        assert output.getvalue() == ""

    def test_error_json_includes_data(self, capsys: pytest.CaptureFixture[str]) -> None:
        ctx, _ = make_ctx(json_mode=True)
        ctx.error("boom", {"type": "MigrationError"})
        assert json.loads(capsys.readouterr().out) == {"error": "boom", "type": "MigrationError"}

    def test_success_in_normal_mode(self) -> None:
        ctx, output = make_ctx()
        ctx.success("All done", {"ignored": True})
        assert "All done" in output.getvalue()
