"""Tests for internal release-tag detection."""

from prunedts.analysis.markers import find_internal_marker, has_release_tag
from prunedts.analysis.tokenizer import tokenize


class TestHasReleaseTag:
    """Tests for has_release_tag function."""

    def test_doc_comment_with_tag(self):
        result = has_release_tag("/** @internal */")
        assert result.matched
        assert result.tag == "@internal"

    def test_multiline_doc_comment(self):
        assert has_release_tag("/**\n * Creates a repo.\n * @internal\n */").matched

    def test_plain_block_comment_does_not_count(self):
        assert not has_release_tag("/* @internal */").matched

    def test_line_comment_does_not_count(self):
        assert not has_release_tag("// @internal").matched

    def test_longer_tag_does_not_match(self):
        """@internalish is a different tag."""
        assert not has_release_tag("/** @internalish */").matched
        assert not has_release_tag("/** @internal-only */").matched

    def test_custom_tag(self):
        assert has_release_tag("/** @hidden */", "@hidden").matched
        assert not has_release_tag("/** @internal */", "@hidden").matched

    def test_empty_comment(self):
        assert not has_release_tag(None).matched
        assert not has_release_tag("").matched


class TestFindInternalMarker:
    """Tests for find_internal_marker function."""

    def test_only_last_leading_doc_comment_counts(self):
        leading = tokenize("/** @internal */\n/** Public docs */")
        assert not find_internal_marker(leading, []).matched

    def test_last_leading_doc_comment(self):
        leading = tokenize("/** Docs */\n// note\n/** @internal */")
        assert find_internal_marker(leading, []).matched

    def test_inline_comment(self):
        inline = tokenize("/** @internal */")
        assert find_internal_marker([], inline).matched

    def test_no_comments(self):
        assert not find_internal_marker([], []).matched
