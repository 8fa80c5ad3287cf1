"""Unit tests for SourceIndex positional queries."""

import pytest

from commentguard.analyzers.source_index import PREVIEW_MAX_LENGTH, SourceIndex, preview_text
from commentguard.models.syntax import CommentKind, CommentToken, NodeKind, SourceFile, SourceSpan


SAMPLE = """
const a = 1; // after a
// before if
if (a) {
  b();
}
"""


@pytest.fixture
def index(parse):
    return SourceIndex(parse(SAMPLE))


def _if_node(index):
    return next(index.iter_kinds([NodeKind.CONDITIONAL]))


class TestCommentQueries:
    """Tests for comment lookups around nodes."""

    def test_comments_before_node(self, index):
        """Test that every comment after the previous code token is returned."""
        texts = [c.text for c in index.comments_before(_if_node(index))]
        assert texts == [" after a", " before if"]

    def test_comments_after_node(self, index):
        """Test that comments up to the next code token are returned."""
        declaration = next(n for n in index.source.nodes if n.node_type == "lexical_declaration")
        texts = [c.text for c in index.comments_after(declaration)]
        assert texts == [" after a", " before if"]

    def test_comments_after_last_node(self, parse):
        """Test that comments at the end of the file follow the last node."""
        index = SourceIndex(parse("run();\n// the end\n"))
        statement = next(n for n in index.source.nodes if n.node_type == "expression_statement")
        assert [c.text for c in index.comments_after(statement)] == [" the end"]

    def test_comments_on_line(self, index):
        """Test that comments are looked up by start line."""
        assert [c.text for c in index.comments_on_line(1)] == [" after a"]
        assert index.comments_on_line(4) == []

    def test_unlocated_comments_are_dropped(self):
        """Test that comments without a location never become candidates."""
        source = SourceFile(
            file_path="a.ts",
            language="typescript",
            lines=["// located"],
            comments=[
                CommentToken(text=" floating", kind=CommentKind.LINE),
                CommentToken(
                    text=" located",
                    kind=CommentKind.LINE,
                    span=SourceSpan.from_points(1, 0, 1, 10),
                ),
            ],
        )
        index = SourceIndex(source)
        assert [c.text for c in index.comments] == [" located"]


class TestTokenQueries:
    """Tests for code token lookups."""

    def test_first_token(self, index):
        """Test that the first token of a conditional is its keyword."""
        assert index.first_token(_if_node(index)).token_type == "if"

    def test_tokens_between_excludes_comments(self, index):
        """Test that only code tokens are returned between two positions."""
        tokens = index.tokens_between((1, 0), (3, 0))
        assert [t.token_type for t in tokens] == ["const", "identifier", "=", "number", ";"]

    def test_token_before(self, index):
        """Test that comments are only considered when requested."""
        assert index.token_before((2, 0)).token_type == ";"
        assert index.token_before((2, 0), include_comments=True).text == " after a"

    def test_token_before_start_of_file(self, index):
        """Test that nothing precedes the first token."""
        assert index.token_before((1, 0)) is None


class TestNodeQueries:
    """Tests for node arena navigation."""

    def test_node_lookup_out_of_range(self, index):
        """Test that invalid ids resolve to None."""
        assert index.node(None) is None
        assert index.node(-1) is None
        assert index.node(len(index.source.nodes)) is None

    def test_iter_kinds_in_document_order(self, parse):
        """Test that nodes are yielded in document order."""
        index = SourceIndex(parse("if (a) {}\nwhile (b) {}\nif (c) {}\n"))
        found = list(index.iter_kinds([NodeKind.CONDITIONAL, NodeKind.WHILE_LOOP]))
        assert [(n.kind, n.start.line) for n in found] == [
            (NodeKind.CONDITIONAL, 1),
            (NodeKind.WHILE_LOOP, 2),
            (NodeKind.CONDITIONAL, 3),
        ]

    def test_enclosing_statement_of_ternary(self, parse):
        """Test that a ternary resolves to its declaration statement."""
        index = SourceIndex(parse("const label = ok ? 'yes' : 'no';\n"))
        ternary = next(index.iter_kinds([NodeKind.TERNARY]))
        assert index.enclosing_statement(ternary).node_type == "lexical_declaration"

    def test_enclosing_statement_inside_block(self, parse):
        """Test that an expression statement inside a block is found."""
        index = SourceIndex(parse("function f() {\n  ok ? run() : stop();\n}\n"))
        ternary = next(index.iter_kinds([NodeKind.TERNARY]))
        assert index.enclosing_statement(ternary).node_type == "expression_statement"

    def test_enclosing_statement_of_class_field(self, parse):
        """Test that a class field initializer resolves to the field, not the class."""
        index = SourceIndex(parse("class Widget {\n  mode = on ? 1 : 2;\n}\n"))
        ternary = next(index.iter_kinds([NodeKind.TERNARY]))
        assert index.enclosing_statement(ternary).node_type == "public_field_definition"

    def test_enclosing_statement_stops_at_member_list(self, parse):
        """Test that the walk stops at a class body."""
        index = SourceIndex(parse("class Widget {\n  mode = on ? 1 : 2;\n}\n"))
        field = next(n for n in index.source.nodes if n.node_type == "public_field_definition")
        assert field.kind == NodeKind.MEMBER
        assert index.enclosing_statement(field) is None


class TestPreview:
    """Tests for line previews."""

    def test_preview_is_trimmed(self, index):
        """Test that previews drop surrounding whitespace."""
        assert index.line_preview(4) == "b();"

    def test_preview_out_of_range(self, index):
        """Test that unknown lines preview as empty text."""
        assert index.line_preview(None) == ""
        assert index.line_preview(0) == ""
        assert index.line_preview(999) == ""

    def test_long_preview_is_shortened(self):
        """Test that long lines are cut to the preview length."""
        text = preview_text("x" * 200)
        assert len(text) == PREVIEW_MAX_LENGTH
        assert text.endswith("...")

    def test_preview_at_limit_is_kept(self):
        """Test that a line of exactly the preview length is unchanged."""
        line = "y" * PREVIEW_MAX_LENGTH
        assert preview_text(line) == line
