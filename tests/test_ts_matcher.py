"""Tests for the path.join(os.tmpdir(), `...${x}`) matcher."""

import pytest

from tmpguard.scanner.ts_matcher import (
    SourceParseError,
    dialect_for,
    find_dynamic_tmpdir_joins,
    has_dynamic_tmpdir_join,
    might_contain_dynamic_tmpdir_join,
)

DYNAMIC_FIXTURES = [
    "const p = path.join(os.tmpdir(), `openclaw-${id}`);",
    "const p = path.join(os.tmpdir(), 'safe', `${token}`);",
    "const p = path.join(os.tmpdir(), 'a', 'b', `c-${n}.json`);",
    "const p = path.join(os.tmpdir(), /* dir */ `openclaw-${id}`);",
    "export function f() {\n  return () => path.join(\n    os.tmpdir(),\n    `x-${Date.now()}`,\n  );\n}",
    "await fs.mkdir(path.join(os.tmpdir(), `run-${process.pid}`), { recursive: true });",
]

STATIC_FIXTURES = [
    "const p = path.join(os.tmpdir(), 'openclaw-fixed');",
    "const p = path.join(os.tmpdir(), `openclaw-fixed`);",
    "const p = path.join(os.tmpdir(), prefix + '-x');",
    "const p = path.join(os.tmpdir(), segment);",
    "const p = path.join('/tmp', `openclaw-${id}`);",
    "// path.join(os.tmpdir(), `openclaw-${id}`)",
    "const p = path.join(os.tmpdir());",
]


class TestDynamicFixtures:
    """Interpolated segments after os.tmpdir() are detected."""

    @pytest.mark.parametrize("source", DYNAMIC_FIXTURES)
    def test_detects(self, source: str):
        assert has_dynamic_tmpdir_join(source) is True


class TestStaticFixtures:
    """Static segments, other receivers and comments are not flagged."""

    @pytest.mark.parametrize("source", STATIC_FIXTURES)
    def test_ignores(self, source: str):
        assert has_dynamic_tmpdir_join(source) is False

    def test_string_literal_containing_pattern(self):
        source = "const doc = \"path.join(os.tmpdir(), `x-${id}`)\";"
        assert has_dynamic_tmpdir_join(source) is False

    def test_block_comment(self):
        source = "/*\n const p = path.join(os.tmpdir(), `x-${id}`);\n*/\nexport {};"
        assert has_dynamic_tmpdir_join(source) is False

    def test_tmpdir_with_argument(self):
        source = "const p = path.join(os.tmpdir(x), `x-${id}`);"
        assert has_dynamic_tmpdir_join(source) is False

    def test_tmpdir_not_first(self):
        source = "const p = path.join(base, os.tmpdir(), `x-${id}`);"
        assert has_dynamic_tmpdir_join(source) is False

    def test_renamed_import_not_detected(self):
        source = "import nodePath from 'node:path';\nconst p = nodePath.join(os.tmpdir(), `x-${id}`);"
        assert has_dynamic_tmpdir_join(source) is False

    def test_tagged_template_is_not_a_call(self):
        source = "const p = path.join`${os.tmpdir()}/${id}`;"
        assert has_dynamic_tmpdir_join(source) is False


class TestPreCheck:
    """The textual pre-check only rejects sources that cannot match."""

    def test_requires_all_tokens(self):
        assert might_contain_dynamic_tmpdir_join("path.join(os.tmpdir(), 'x')") is False
        assert might_contain_dynamic_tmpdir_join("path.join(tmp, `x-${id}`)") is False
        assert might_contain_dynamic_tmpdir_join("join(os.tmpdir(), `x-${id}`)") is False

    @pytest.mark.parametrize("source", DYNAMIC_FIXTURES)
    def test_never_rejects_a_match(self, source: str):
        assert might_contain_dynamic_tmpdir_join(source) is True

    def test_unparsable_source_without_tokens_is_not_parsed(self):
        assert has_dynamic_tmpdir_join("function {{{ broken") is False


class TestDialects:
    """JSX-flavored files use the tsx grammar."""

    def test_dialect_selection(self):
        assert dialect_for("src/App.tsx") == "tsx"
        assert dialect_for("src/App.TSX") == "tsx"
        assert dialect_for("src/app.ts") == "typescript"

    def test_tsx_source(self):
        source = (
            "export const View = () => (\n"
            "  <div title={path.join(os.tmpdir(), `v-${id}`)}>hi</div>\n"
            ");\n"
        )
        assert has_dynamic_tmpdir_join(source, "src/View.tsx") is True

    def test_typescript_generics(self):
        source = (
            "function make<T>(value: T): string {\n"
            "  return path.join(os.tmpdir(), `cache-${String(value)}`);\n"
            "}\n"
        )
        assert has_dynamic_tmpdir_join(source, "src/cache.ts") is True


class TestOccurrences:
    """Every occurrence is reported with its location."""

    def test_reports_each_call(self):
        source = (
            "import os from 'node:os';\n"
            "const a = path.join(os.tmpdir(), `a-${x}`);\n"
            "const b = path.join(os.tmpdir(), 'static');\n"
            "const c = path.join(os.tmpdir(), 'sub', `c-${y}`);\n"
        )
        occurrences = find_dynamic_tmpdir_joins(source, "src/a.ts")
        assert [o.line for o in occurrences] == [2, 4]
        assert occurrences[0].source_line == "const a = path.join(os.tmpdir(), `a-${x}`);"
        assert occurrences[0].col == 10

    @pytest.mark.parametrize("separator", ["\x0c", "\u2028", "\x1c"])
    def test_source_line_ignores_non_newline_breaks(self, separator: str):
        source = f"// note{separator}page\nconst p = path.join(os.tmpdir(), `x-${{id}}`);\n"
        occurrences = find_dynamic_tmpdir_joins(source, "src/a.ts")
        assert [o.line for o in occurrences] == [2]
        assert occurrences[0].source_line == "const p = path.join(os.tmpdir(), `x-${id}`);"

    def test_source_line_with_crlf(self):
        source = "// note\r\nconst p = path.join(os.tmpdir(), `x-${id}`);\r\n"
        occurrences = find_dynamic_tmpdir_joins(source, "src/a.ts")
        assert [o.line for o in occurrences] == [2]
        assert occurrences[0].source_line == "const p = path.join(os.tmpdir(), `x-${id}`);"

    def test_no_tokens_no_occurrences(self):
        assert find_dynamic_tmpdir_joins("export const x = 1;\n") == []


class TestParseFailures:
    """Syntax errors surface instead of silently passing."""

    def test_broken_source_raises(self):
        source = "const p = path.join(os.tmpdir(), `fixed`;\nfunction {\n"
        with pytest.raises(SourceParseError) as exc_info:
            has_dynamic_tmpdir_join(source, "src/broken.ts")
        assert exc_info.value.file_path == "src/broken.ts"

    def test_parse_error_is_value_error(self):
        assert issubclass(SourceParseError, ValueError)

    def test_match_before_error_is_reported(self):
        source = "const p = path.join(os.tmpdir(), `x-${id}`);\nfunction {\n"
        assert has_dynamic_tmpdir_join(source, "src/partial.ts") is True
