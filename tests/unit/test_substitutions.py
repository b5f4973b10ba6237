"""Unit tests for substitution handlers."""

import pytest

from viewforge.core.tokens import TokenRegistry
from viewforge.interfaces.directive import ProcessPhase
from viewforge.strategies.substitutions import (
    AntiForgeryTokenSubstitution,
    CommentSubstitution,
    HeadSubstitution,
)


# =============================================================================
# Comment Substitution Tests
# =============================================================================


class TestCommentSubstitution:
    """Test suite for CommentSubstitution."""

    @pytest.fixture
    def handler(self):
        return CommentSubstitution()

    def test_phase(self, handler):
        assert handler.phase == ProcessPhase.COMPILE

    def test_removes_comment_blocks(self, handler):
        content = "<p>a</p>@@ note @@<p>b</p>@@\nmulti\nline\n@@<p>c</p>"

        assert handler.process(content) == "<p>a</p><p>b</p><p>c</p>"

    def test_unterminated_marker_is_kept(self, handler):
        assert handler.process("<p>50@@</p>") == "<p>50@@</p>"


# =============================================================================
# Head Substitution Tests
# =============================================================================


class TestHeadSubstitution:
    """Test suite for HeadSubstitution."""

    @pytest.fixture
    def handler(self):
        return HeadSubstitution()

    def test_hoists_blocks_in_document_order(self, handler):
        """Test that head blocks land in the slot in the order they appear."""
        content = (
            "<head>%%Head%%</head>\n"
            "<body>[[<title>T</title>]]<p/>[[<meta name=\"a\" />]]</body>"
        )

        result = handler.process(content)

        assert result == '<head><title>T</title><meta name="a" /></head>\n<body><p/></body>'

    def test_strips_leading_indentation(self, handler):
        content = "%%Head%%\n[[\n    <title>T</title>\n    <meta />\n]]"

        assert handler.process(content) == "<title>T</title>\n<meta />\n\n"

    def test_slot_removed_without_blocks(self, handler):
        assert handler.process("<head>%%Head%%</head>") == "<head></head>"

    def test_only_first_slot_filled(self, handler):
        content = "%%Head%%|%%Head%%[[<x/>]]"

        assert handler.process(content) == "<x/>|"


# =============================================================================
# Anti-Forgery Substitution Tests
# =============================================================================


class TestAntiForgeryTokenSubstitution:
    """Test suite for AntiForgeryTokenSubstitution."""

    def test_phase(self):
        assert AntiForgeryTokenSubstitution(lambda: "x").phase == ProcessPhase.RENDER

    def test_each_slot_gets_distinct_token(self):
        """Test that every occurrence receives its own registered token."""
        tokens = TokenRegistry()
        handler = AntiForgeryTokenSubstitution(tokens.create_token)

        result = handler.process("<form>%%AntiForgeryToken%%</form><form>%%AntiForgeryToken%%</form>")

        first, second = result.replace("</form>", "").split("<form>")[1:]
        assert first != second
        assert first in tokens
        assert second in tokens
        assert len(tokens) == 2

    def test_no_slot_mints_nothing(self):
        calls: list[int] = []

        def create_token() -> str:
            calls.append(1)
            return "token"

        handler = AntiForgeryTokenSubstitution(create_token)

        assert handler.process("<p>plain</p>") == "<p>plain</p>"
        assert calls == []
