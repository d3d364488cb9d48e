"""Lexer for TypeScript declaration text."""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from enum import Enum, auto

from prunedts.errors import ParseError


class TokenKind(Enum):
    """Lexical token categories."""

    IDENTIFIER = auto()
    PRIVATE_NAME = auto()  # #field
    PUNCTUATOR = auto()
    STRING = auto()
    TEMPLATE = auto()  # A literal chunk of a template string
    NUMBER = auto()
    COMMENT = auto()


@dataclass(frozen=True)
class Token:
    """A lexical token with its source position."""

    kind: TokenKind
    value: str
    start: int
    end: int
    line: int
    column: int

    def is_punct(self, *values: str) -> bool:
        return self.kind is TokenKind.PUNCTUATOR and self.value in values

    @property
    def is_doc_comment(self) -> bool:
        return self.kind is TokenKind.COMMENT and self.value.startswith("/**")


MULTI_CHAR_PUNCTUATORS = ("...", "=>")
SINGLE_CHAR_PUNCTUATORS = set("{}()[]<>;,.:?=|&!*+-/%^~@")


class _LineIndex:
    """Translates offsets to 1-based line/column pairs."""

    def __init__(self, text: str) -> None:
        self._starts = [0]
        for index, char in enumerate(text):
            if char == "\n":
                self._starts.append(index + 1)

    def position(self, offset: int) -> tuple[int, int]:
        line = bisect.bisect_right(self._starts, offset)
        return line, offset - self._starts[line - 1] + 1


def _is_identifier_start(char: str) -> bool:
    return char.isalpha() or char in "_$"


def _is_identifier_part(char: str) -> bool:
    return char.isalnum() or char in "_$\u200c\u200d"


class Tokenizer:
    """Single-pass scanner producing :class:`Token` objects.

    Template literals are split into ``TEMPLATE`` chunks with the tokens of
    every ``${ ... }`` substitution emitted in between, so identifiers used
    inside template literal types are still visible to reference extraction.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.tokens: list[Token] = []
        self._lines = _LineIndex(text)
        # One entry per open "{": True when it opened a template substitution
        self._brace_stack: list[bool] = []

    def _error(self, message: str, offset: int) -> ParseError:
        line, column = self._lines.position(offset)
        return ParseError(message, line, column)

    def _emit(self, kind: TokenKind, start: int, end: int) -> None:
        line, column = self._lines.position(start)
        self.tokens.append(Token(kind, self.text[start:end], start, end, line, column))

    def run(self) -> list[Token]:
        text = self.text
        length = len(text)
        while self.pos < length:
            char = text[self.pos]
            if char.isspace() or char == "\ufeff":
                self.pos += 1
            elif text.startswith("//", self.pos):
                end = text.find("\n", self.pos)
                end = length if end == -1 else end
                self._emit(TokenKind.COMMENT, self.pos, end)
                self.pos = end
            elif text.startswith("/*", self.pos):
                end = text.find("*/", self.pos + 2)
                if end == -1:
                    raise self._error("Unterminated block comment", self.pos)
                self._emit(TokenKind.COMMENT, self.pos, end + 2)
                self.pos = end + 2
            elif char in "'\"":
                self._scan_string(char)
            elif char == "`":
                self._scan_template(self.pos + 1, self.pos)
            elif char == "}" and self._brace_stack and self._brace_stack[-1]:
                self._brace_stack.pop()
                self._scan_template(self.pos + 1, self.pos)
            elif _is_identifier_start(char):
                self._scan_identifier(TokenKind.IDENTIFIER, self.pos)
            elif char == "#" and self.pos + 1 < length and _is_identifier_start(text[self.pos + 1]):
                self._scan_identifier(TokenKind.PRIVATE_NAME, self.pos + 1)
            elif char.isdigit() or (char == "." and text[self.pos + 1 : self.pos + 2].isdigit()):
                self._scan_number()
            else:
                self._scan_punctuator(char)
        if any(self._brace_stack):
            raise self._error("Unterminated template literal", length)
        return self.tokens

    def _scan_string(self, quote: str) -> None:
        start = self.pos
        pos = start + 1
        text = self.text
        while pos < len(text):
            char = text[pos]
            if char == "\\":
                pos += 2
                continue
            if char == quote:
                self._emit(TokenKind.STRING, start, pos + 1)
                self.pos = pos + 1
                return
            if char == "\n":
                break
            pos += 1
        raise self._error("Unterminated string literal", start)

    def _scan_template(self, pos: int, start: int) -> None:
        text = self.text
        while pos < len(text):
            char = text[pos]
            if char == "\\":
                pos += 2
                continue
            if char == "`":
                self._emit(TokenKind.TEMPLATE, start, pos + 1)
                self.pos = pos + 1
                return
            if text.startswith("${", pos):
                self._emit(TokenKind.TEMPLATE, start, pos + 2)
                self._brace_stack.append(True)
                self.pos = pos + 2
                return
            pos += 1
        raise self._error("Unterminated template literal", start)

    def _scan_identifier(self, kind: TokenKind, pos: int) -> None:
        start = self.pos
        pos += 1
        while pos < len(self.text) and _is_identifier_part(self.text[pos]):
            pos += 1
        self._emit(kind, start, pos)
        self.pos = pos

    def _scan_number(self) -> None:
        start = self.pos
        pos = start
        text = self.text
        while pos < len(text) and (text[pos].isalnum() or text[pos] in "._"):
            # Exponent sign: 1e-7
            if text[pos] in "eE" and text[pos + 1 : pos + 2] in ("+", "-") and not text.startswith("0x", start):
                pos += 2
                continue
            pos += 1
        self._emit(TokenKind.NUMBER, start, pos)
        self.pos = pos

    def _scan_punctuator(self, char: str) -> None:
        for punct in MULTI_CHAR_PUNCTUATORS:
            if self.text.startswith(punct, self.pos):
                self._emit(TokenKind.PUNCTUATOR, self.pos, self.pos + len(punct))
                self.pos += len(punct)
                return
        if char not in SINGLE_CHAR_PUNCTUATORS:
            raise self._error(f"Unexpected character {char!r}", self.pos)
        if char == "{":
            self._brace_stack.append(False)
        elif char == "}" and self._brace_stack:
            self._brace_stack.pop()
        self._emit(TokenKind.PUNCTUATOR, self.pos, self.pos + 1)
        self.pos += 1


def tokenize(text: str) -> list[Token]:
    """Tokenize declaration text.

    Raises:
        ParseError: If a string, comment or template literal is unterminated,
            or a character cannot start any token.
    """
    return Tokenizer(text).run()
