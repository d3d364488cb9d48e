"""Release-tag detection in TSDoc comments."""

import re
from dataclasses import dataclass
from typing import Iterable

from prunedts.analysis.tokenizer import Token

DEFAULT_INTERNAL_TAG = "@internal"


@dataclass
class MarkerMatch:
    """Result of release-tag matching."""

    matched: bool
    tag: str
    comment: str = ""


def has_release_tag(comment: str | None, tag: str = DEFAULT_INTERNAL_TAG) -> MarkerMatch:
    """
    Check if a doc comment carries a release tag.

    Only ``/** ... */`` comments count; ``@internalFoo`` or ``foo@internal``
    do not match ``@internal``.

    Args:
        comment: The comment text (e.g., "/** @internal */")
        tag: The tag to look for, including its leading "@"

    Returns:
        MarkerMatch with matched=True if the tag is present
    """
    if not comment or not comment.startswith("/**"):
        return MarkerMatch(matched=False, tag=tag)

    pattern = rf"(?<![\w@]){re.escape(tag)}(?![\w-])"
    if re.search(pattern, comment):
        return MarkerMatch(matched=True, tag=tag, comment=comment)

    return MarkerMatch(matched=False, tag=tag)


def find_internal_marker(
    leading_comments: Iterable[Token],
    inline_comments: Iterable[Token],
    tag: str = DEFAULT_INTERNAL_TAG,
) -> MarkerMatch:
    """Decide whether a statement is marked with ``tag``.

    The statement's own doc comment is the last doc comment before it;
    comments between its first token and its declared name
    (``export /** @internal */ class C``) also count.
    """
    docs = [c for c in leading_comments if c.is_doc_comment]
    candidates = docs[-1:] + [c for c in inline_comments if c.is_doc_comment]
    for comment in candidates:
        match = has_release_tag(comment.value, tag)
        if match.matched:
            return match
    return MarkerMatch(matched=False, tag=tag)
