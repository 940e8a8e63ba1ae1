from __future__ import annotations

from pathlib import Path
import tempfile
import textwrap
import unittest

from msb.dsl import parse, parse_file
from msb.errors import (
    BuildFileNotFound,
    InvalidDependencyBlock,
    InvalidTargetFormat,
    InvalidTargetHeader,
    MismatchedBraces,
    ParseError,
)


EXAMPLE = textwrap.dedent(
    """
    target main [ files(main.c) targets(helper) ] {
      gcc -o main main.c
    }
    target helper outputs(helper.o) [ files(helper.c) targets() ] {
      gcc -c helper.c
    }
    """
)


class ParseTests(unittest.TestCase):
    def test_example_targets_in_declaration_order(self) -> None:
        makefile = parse(EXAMPLE)

        names = [t.name for t in makefile.targets()]
        self.assertEqual(names, ["main", "helper"])

        main = makefile.target("main")
        self.assertEqual(main.file_dependencies, ("main.c",))
        self.assertEqual(main.target_dependencies, ("helper",))
        self.assertEqual(main.commands, ("gcc -o main main.c",))

    def test_outputs_default_to_target_name(self) -> None:
        makefile = parse(EXAMPLE)
        self.assertEqual(makefile.target("main").outputs, ("main",))

    def test_explicit_outputs(self) -> None:
        makefile = parse("target lib outputs(a.o  b.o\n c.o) [ files() targets() ] { true }")
        self.assertEqual(makefile.target("lib").outputs, ("a.o", "b.o", "c.o"))

    def test_empty_outputs_clause_falls_back_to_name(self) -> None:
        makefile = parse("target lib outputs() [ files() targets() ] { true }")
        self.assertEqual(makefile.target("lib").outputs, ("lib",))

    def test_commands_split_on_newlines_and_semicolons(self) -> None:
        source = textwrap.dedent(
            """
            target all [ files() targets() ] {
              echo one; echo two

              echo three ;
            }
            """
        )
        self.assertEqual(parse(source).target("all").commands, ("echo one", "echo two", "echo three"))

    def test_target_dependencies_are_comma_separated(self) -> None:
        makefile = parse("target all [ files(x.c  y.c) targets(a , b,c,) ] { }")
        target = makefile.target("all")
        self.assertEqual(target.target_dependencies, ("a", "b", "c"))
        self.assertEqual(target.file_dependencies, ("x.c", "y.c"))
        self.assertEqual(target.commands, ())

    def test_nested_braces_stay_inside_the_command(self) -> None:
        makefile = parse("target a [ files() targets() ] { echo {x} }\ntarget b [ files() targets() ] { true }")
        self.assertEqual(makefile.target("a").commands, ("echo {x}",))
        self.assertEqual(len(makefile), 2)

    def test_comment_lines_are_ignored(self) -> None:
        source = textwrap.dedent(
            """
            # helpers { not a block
            target a [ files() targets() ] {
              # not a command
              true
            }
            """
        )
        self.assertEqual(parse(source).target("a").commands, ("true",))

    def test_empty_source_has_no_targets(self) -> None:
        self.assertEqual(parse("  \n\n").targets(), [])

    def test_duplicate_names_first_wins(self) -> None:
        makefile = parse("target a [ files() targets() ] { echo first }\ntarget a [ files() targets() ] { echo second }")
        self.assertEqual(len(makefile), 2)
        self.assertEqual(makefile.target("a").commands, ("echo first",))

    def test_unknown_target_lookup_returns_none(self) -> None:
        self.assertIsNone(parse(EXAMPLE).target("nope"))


class ParseErrorTests(unittest.TestCase):
    def test_missing_closing_brace(self) -> None:
        with self.assertRaises(MismatchedBraces) as ctx:
            parse("target a [ files() targets() ] {\n  echo a\n")
        self.assertEqual(ctx.exception.line, 1)

    def test_stray_closing_brace(self) -> None:
        with self.assertRaises(MismatchedBraces) as ctx:
            parse("target a [ files() targets() ] { echo a }\n}\n")
        self.assertEqual(ctx.exception.line, 2)

    def test_missing_dependency_block(self) -> None:
        with self.assertRaises(InvalidTargetHeader) as ctx:
            parse("target a { echo a }")
        self.assertEqual(ctx.exception.target, "a")

    def test_missing_dependency_block_before_brace_without_space(self) -> None:
        with self.assertRaises(InvalidTargetHeader) as ctx:
            parse("target a{ true }")
        self.assertEqual(ctx.exception.target, "a")
        self.assertIn("'['", ctx.exception.message)

    def test_missing_closing_bracket(self) -> None:
        with self.assertRaises(InvalidTargetHeader):
            parse("target a [ files() targets() { echo a }")

    def test_unclosed_outputs(self) -> None:
        with self.assertRaises(InvalidTargetHeader):
            parse("target a outputs(a.o [ files( targets( ] { echo a }")

    def test_missing_targets_marker(self) -> None:
        with self.assertRaises(InvalidDependencyBlock):
            parse("target a [ files(a.c) ] { echo a }")

    def test_missing_files_marker(self) -> None:
        with self.assertRaises(InvalidDependencyBlock):
            parse("target a [ targets(b) ] { echo a }")

    def test_whitespace_separated_target_dependencies(self) -> None:
        with self.assertRaises(InvalidDependencyBlock):
            parse("target a [ files() targets(b c) ] { echo a }")

    def test_not_a_target_declaration(self) -> None:
        with self.assertRaises(InvalidTargetFormat):
            parse("rule a [ files() targets() ] { echo a }")

    def test_non_alphanumeric_name(self) -> None:
        with self.assertRaises(InvalidTargetFormat):
            parse("target my-app [ files() targets() ] { echo a }")

    def test_missing_command_block(self) -> None:
        with self.assertRaises(InvalidTargetFormat) as ctx:
            parse("target a [ files() targets() ]\n")
        self.assertEqual(ctx.exception.target, "a")

    def test_error_reports_line_of_later_declaration(self) -> None:
        source = "target a [ files() targets() ] { true }\n\ntarget b [ files() ] { true }\n"
        with self.assertRaises(InvalidDependencyBlock) as ctx:
            parse(source)
        self.assertEqual(ctx.exception.line, 3)
        self.assertIn("line 3", str(ctx.exception))

    def test_all_parse_errors_share_a_base(self) -> None:
        for source in ("target a {", "target a { }", "target a [ ] { }", "junk"):
            with self.subTest(source=source):
                with self.assertRaises(ParseError):
                    parse(source)


class ParseFileTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.workspace = Path(self.temp_dir.name)

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_parse_file_reads_build_description(self) -> None:
        path = self.workspace / "build.msb"
        path.write_text(EXAMPLE, encoding="utf-8")
        self.assertEqual([t.name for t in parse_file(path).targets()], ["main", "helper"])

    def test_missing_build_file(self) -> None:
        with self.assertRaises(BuildFileNotFound) as ctx:
            parse_file(self.workspace / "nope.msb")
        self.assertIn("nope.msb", str(ctx.exception))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
