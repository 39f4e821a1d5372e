"""Unit tests for IndentedWriter."""

from __future__ import annotations

from flatbuild_core.compiler.writer import IndentedWriter


class TestIndentedWriter:
    """Tests for IndentedWriter."""

    def test_nested_indentation(self) -> None:
        writer = IndentedWriter()
        writer.write_line("void Build()")
        writer.write_line("{")
        with writer.indent():
            writer.write_line("if (x)")
            writer.write_line("{")
            with writer.indent():
                writer.write_line("A = 1;")
            writer.write_line("}")
        writer.write_line("}")

        assert writer.getvalue() == (
            "void Build()\n{\n    if (x)\n    {\n        A = 1;\n    }\n}\n"
        )

    def test_empty_lines_carry_no_indentation(self) -> None:
        writer = IndentedWriter()
        with writer.indent():
            writer.write_line()
            writer.write_line("")

        assert writer.getvalue() == "\n\n"

    def test_custom_indent_size(self) -> None:
        writer = IndentedWriter(indent_size=2)
        with writer.indent():
            writer.write_line("x")

        assert writer.getvalue() == "  x\n"

    def test_indent_level_restored_after_exception(self) -> None:
        writer = IndentedWriter()
        try:
            with writer.indent():
                raise RuntimeError("boom")
        except RuntimeError:
            pass

        assert writer.level == 0

    def test_write_block_is_verbatim(self) -> None:
        writer = IndentedWriter()
        with writer.indent():
            writer.write_block("a\n  b\n")

        assert writer.getvalue() == "a\n  b\n"
