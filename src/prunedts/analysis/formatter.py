"""Whitespace normalization of serialized declaration text."""

import re

from prunedts.analysis.parser import split_statements

_WHITESPACE_RUN = re.compile(r"[ \t\r\n]*")


def add_blank_lines(text: str) -> str:
    """Put exactly one blank line after the leading block of imports.

    The block is the run of import statements at the start of the file
    (blank lines between them are allowed). Indentation of the following
    statement's first line is preserved and nothing else is touched, so
    applying this twice gives the same text as applying it once.

    Raises:
        ParseError: If the text cannot be tokenized.
    """
    spans = split_statements(text)
    if not spans or not spans[0].is_import:
        return text

    count = 0
    while count < len(spans) and spans[count].is_import:
        count += 1
    if count == len(spans):
        return text

    end = spans[count - 1].end
    gap = _WHITESPACE_RUN.match(text, end)
    whitespace = gap.group()
    indent = whitespace.rsplit("\n", 1)[-1] if "\n" in whitespace else ""
    newline = "\r\n" if "\r\n" in text else "\n"
    return text[:end] + newline * 2 + indent + text[gap.end() :]
