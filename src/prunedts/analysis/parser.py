"""Statement splitting and classification for declaration files."""

from __future__ import annotations

import bisect
import re
from dataclasses import dataclass, field

from prunedts.analysis.markers import DEFAULT_INTERNAL_TAG, find_internal_marker
from prunedts.analysis.tokenizer import Token, TokenKind, tokenize
from prunedts.errors import ParseError
from prunedts.models.declaration import (
    DeclarationFile,
    ImportSpecifier,
    ImportStatement,
    Statement,
    StatementKind,
    Visibility,
)

MODIFIERS = {"export", "declare", "default", "abstract", "async"}

# Declarations whose closing "}" ends the statement
BLOCK_KEYWORDS = {"class", "interface", "enum", "namespace", "module", "global"}

DECLARATION_KEYWORDS = {
    "class",
    "interface",
    "type",
    "enum",
    "namespace",
    "module",
    "function",
    "const",
    "let",
    "var",
}

# A statement keyword at the start of a line begins a new statement
STATEMENT_STARTS = DECLARATION_KEYWORDS | {"export", "import", "declare", "abstract"}

# Tokens after which a line break never ends a statement
CONTINUATION_TOKENS = {
    "=", "|", "&", ",", ":", "=>", ".", "<", "?", "(", "[", "{", "...",
    "extends", "implements", "keyof", "typeof", "in", "is", "as", "new",
    "readonly", "infer", "unique", "asserts", "from", "import", "export",
    "declare", "default", "abstract",
}

MEMBER_MODIFIERS = {
    "readonly", "static", "public", "private", "protected", "abstract",
    "override", "declare", "get", "set", "accessor", "async",
}

MEMBER_NAME_FOLLOWERS = {":", "?", "(", "<", "=", ",", ";", "}"}

PARAMETER_PRECEDERS = {"(", ",", "...", "["}

TYPE_PARAMETER_PRECEDERS = {"(", ":", "=", "|", "&", "=>", ",", "{", ";"}

KEYWORDS = {
    "abstract", "accessor", "any", "as", "asserts", "async", "await", "bigint",
    "boolean", "break", "case", "catch", "class", "const", "constructor",
    "continue", "debugger", "declare", "default", "delete", "do", "else", "enum",
    "export", "extends", "false", "finally", "for", "from", "function", "get",
    "global", "if", "implements", "import", "in", "infer", "instanceof",
    "interface", "intrinsic", "is", "keyof", "let", "module", "namespace",
    "never", "new", "null", "number", "object", "of", "out", "override",
    "private", "protected", "public", "readonly", "require", "return",
    "satisfies", "set", "static", "string", "super", "switch", "symbol", "this",
    "throw", "true", "try", "type", "typeof", "undefined", "unique", "unknown",
    "var", "void", "while", "with", "yield",
}

CLOSERS = {"(": ")", "[": "]", "{": "}"}

BLANK_LINE = re.compile(r"\n[ \t]*\r?\n")

# One comment in the trivia above the first statement, with its line break
TRIVIA_COMMENT = re.compile(r"[ \t\r\n]*(/\*.*?\*/|//[^\n]*)[ \t]*(?:\r?\n)?", re.S)

# Tags marking a comment as documentation of the whole file
FILE_COMMENT_TAG = re.compile(r"@(?:license|preserve|packageDocumentation|fileoverview)\b")


class _Unrecognized(Exception):
    """Raised internally when a statement form cannot be fully understood."""


@dataclass
class StatementSpan:
    """Source range and significant tokens of one top-level statement."""

    tokens: list[Token]
    start: int
    end: int
    comments: list[Token] = field(default_factory=list)  # Comments inside the range

    @property
    def head(self) -> str:
        return self.tokens[0].value

    @property
    def is_import(self) -> bool:
        first = self.tokens[0]
        if first.kind is not TokenKind.IDENTIFIER or first.value != "import":
            return False
        # import("x") and import.meta are expressions
        return len(self.tokens) < 2 or not self.tokens[1].is_punct("(", ".")


def _comments_between(tokens: list[Token], starts: list[int], lo: int, hi: int) -> list[Token]:
    """Comment tokens starting in the half-open offset range ``[lo, hi)``."""
    result: list[Token] = []
    for index in range(bisect.bisect_left(starts, lo), len(tokens)):
        tok = tokens[index]
        if tok.start >= hi:
            break
        if tok.kind is TokenKind.COMMENT:
            result.append(tok)
    return result


def _head_keyword(tokens: list[Token]) -> str | None:
    for tok in tokens:
        if tok.kind is not TokenKind.IDENTIFIER:
            return None
        if tok.value in MODIFIERS or tok.value == "const":
            continue
        return tok.value
    return None


class _Splitter:
    """Groups a token stream into top-level statements."""

    def __init__(self, text: str, tokens: list[Token]) -> None:
        self.text = text
        self.tokens = tokens
        self.spans: list[StatementSpan] = []
        self._starts = [t.start for t in tokens]

    def run(self) -> list[StatementSpan]:
        significant = [t for t in self.tokens if t.kind is not TokenKind.COMMENT]
        current: list[Token] = []
        # Open brackets with a flag telling whether "{" opened a declaration body
        stack: list[tuple[Token, bool]] = []
        angle = 0
        index = 0
        while index < len(significant):
            tok = significant[index]
            if current and not stack and angle == 0 and self._starts_statement(current[-1], tok):
                self._close(current)
                current = []

            current.append(tok)
            if tok.is_punct("{", "(", "["):
                is_body = (
                    tok.value == "{"
                    and not stack
                    and angle == 0
                    and _head_keyword(current) in BLOCK_KEYWORDS
                    and not any(t.is_punct("=") for t in current)
                )
                stack.append((tok, is_body))
            elif tok.is_punct(")", "]", "}"):
                if not stack or CLOSERS[stack[-1][0].value] != tok.value:
                    raise ParseError(f"Unbalanced '{tok.value}'", tok.line, tok.column)
                _, is_body = stack.pop()
                if is_body:
                    following = significant[index + 1] if index + 1 < len(significant) else None
                    if following is not None and following.is_punct(";"):
                        current.append(following)
                        index += 1
                    self._close(current)
                    current = []
                    angle = 0
            elif not stack and tok.is_punct("<"):
                angle += 1
            elif not stack and tok.is_punct(">"):
                angle = max(angle - 1, 0)
            elif not stack and tok.is_punct(";"):
                self._close(current)
                current = []
                angle = 0
            index += 1

        if stack:
            opener = stack[-1][0]
            raise ParseError(f"Unclosed '{opener.value}'", opener.line, opener.column)
        if current:
            self._close(current)
        return self.spans

    def _starts_statement(self, previous: Token, tok: Token) -> bool:
        if tok.kind is not TokenKind.IDENTIFIER or tok.value not in STATEMENT_STARTS:
            return False
        if tok.line == previous.line:
            return False
        return previous.value not in CONTINUATION_TOKENS

    def _close(self, tokens: list[Token]) -> None:
        start, end = tokens[0].start, tokens[-1].end
        end = self._trailing_comment_end(tokens[-1], end)
        comments = _comments_between(self.tokens, self._starts, start, end)
        self.spans.append(StatementSpan(tokens=list(tokens), start=start, end=end, comments=comments))

    def _trailing_comment_end(self, last: Token, end: int) -> int:
        """Extend ``end`` over a comment that finishes the statement's last line."""
        for index in range(bisect.bisect_left(self._starts, end), len(self.tokens)):
            tok = self.tokens[index]
            if tok.kind is not TokenKind.COMMENT or tok.line != last.line:
                break
            if self.text[end : tok.start].strip():
                break
            line_end = self.text.find("\n", tok.end)
            rest = self.text[tok.end : len(self.text) if line_end == -1 else line_end]
            if rest.strip():
                break
            end = tok.end
        return end


def split_statements(text: str, tokens: list[Token] | None = None) -> list[StatementSpan]:
    """Split declaration text into top-level statement spans.

    Raises:
        ParseError: If the text cannot be tokenized or brackets do not balance.
    """
    if tokens is None:
        tokens = tokenize(text)
    return _Splitter(text, tokens).run()


def _type_parameter_indices(tokens: list[Token], names: set[int]) -> set[int]:
    """Indices of identifiers declared in ``<...>`` type parameter lists."""
    result: set[int] = set()
    for index, tok in enumerate(tokens):
        if not tok.is_punct("<") or index == 0:
            continue
        prev = tokens[index - 1]
        opens = prev.value in TYPE_PARAMETER_PRECEDERS and prev.kind is TokenKind.PUNCTUATOR
        if prev.kind is TokenKind.IDENTIFIER:
            opens = (
                index - 1 in names
                or prev.value in ("new", "function")
                or _is_member_name(tokens, index - 1)
            )
        if not opens:
            continue
        depth = 0
        expect = True
        for position in range(index + 1, len(tokens)):
            inner = tokens[position]
            if inner.is_punct("<", "(", "[", "{"):
                depth += 1
            elif inner.is_punct(">", ")", "]", "}"):
                if depth == 0:
                    break
                depth -= 1
            elif depth == 0 and inner.is_punct(","):
                expect = True
                continue
            if expect and depth == 0 and inner.kind is TokenKind.IDENTIFIER:
                following = tokens[position + 1] if position + 1 < len(tokens) else None
                if inner.value in ("const", "in", "out") and following and following.kind is TokenKind.IDENTIFIER:
                    continue
                result.add(position)
            expect = False
    return result


def _is_member_name(tokens: list[Token], index: int) -> bool:
    """An identifier starting a property, method or accessor signature."""
    if index == 0 or index + 1 >= len(tokens):
        return False
    prev, nxt = tokens[index - 1], tokens[index + 1]
    if nxt.kind is not TokenKind.PUNCTUATOR or nxt.value not in MEMBER_NAME_FOLLOWERS:
        return False
    if prev.is_punct("{", ";"):
        return True
    return prev.kind is TokenKind.IDENTIFIER and prev.value in MEMBER_MODIFIERS and (
        index < 2 or tokens[index - 2].is_punct("{", ";") or tokens[index - 2].value in MEMBER_MODIFIERS
    )


def _is_parameter_name(tokens: list[Token], index: int) -> bool:
    """A parameter, named tuple member or index signature key."""
    if index == 0 or index + 1 >= len(tokens):
        return False
    prev, nxt = tokens[index - 1], tokens[index + 1]
    preceded = prev.is_punct(*PARAMETER_PRECEDERS) or (
        prev.kind is TokenKind.IDENTIFIER and prev.value in ("readonly", "public", "private", "protected")
    )
    if not preceded:
        return False
    if nxt.is_punct(":"):
        return True
    after = tokens[index + 2] if index + 2 < len(tokens) else None
    return nxt.is_punct("?") and after is not None and after.is_punct(":")


def extract_references(
    tokens: list[Token],
    names: set[int] | None = None,
    enum_body: bool = False,
) -> tuple[set[str], set[str]]:
    """Collect referenced identifiers and statement-local type names.

    Args:
        tokens: Significant tokens of one statement
        names: Indices of the statement's own declared-name tokens
        enum_body: Treat identifiers inside the first brace block as enum members

    Returns:
        Tuple of (references, local_names)
    """
    names = names or set()
    references: set[str] = set()
    local_names: set[str] = set()
    type_parameters = _type_parameter_indices(tokens, names)

    depth = 0
    in_initializer = False
    for index, tok in enumerate(tokens):
        if tok.is_punct("{", "(", "["):
            depth += 1
        elif tok.is_punct("}", ")", "]"):
            depth -= 1
            if depth == 0:
                in_initializer = False
        elif enum_body and depth == 1 and tok.is_punct("="):
            in_initializer = True
        elif enum_body and depth == 1 and tok.is_punct(","):
            in_initializer = False

        if tok.kind is not TokenKind.IDENTIFIER or index in names:
            continue
        prev = tokens[index - 1] if index else None
        nxt = tokens[index + 1] if index + 1 < len(tokens) else None

        if prev is not None and prev.is_punct("."):
            continue
        if tok.value in KEYWORDS:
            continue
        if index in type_parameters:
            local_names.add(tok.value)
            continue
        if prev is not None and prev.kind is TokenKind.IDENTIFIER:
            if prev.value == "infer":
                local_names.add(tok.value)
                continue
            if prev.value in DECLARATION_KEYWORDS:
                # Nested declaration inside a namespace body
                local_names.add(tok.value)
                continue
            if prev.value == "asserts":
                continue
        if nxt is not None and nxt.kind is TokenKind.IDENTIFIER:
            if nxt.value == "in" and prev is not None and prev.is_punct("["):
                local_names.add(tok.value)  # Mapped type key
                continue
            if nxt.value == "is":
                continue  # Type predicate parameter
        if enum_body and depth == 1 and not in_initializer:
            continue
        if _is_member_name(tokens, index) or _is_parameter_name(tokens, index):
            continue
        references.add(tok.value)

    return references, local_names


def _unquote(tok: Token) -> str:
    if tok.kind is not TokenKind.STRING:
        raise _Unrecognized(tok.value)
    return tok.value[1:-1]


class DeclarationParser:
    """Builds a :class:`DeclarationFile` from declaration text."""

    def __init__(self, internal_tag: str = DEFAULT_INTERNAL_TAG) -> None:
        self.internal_tag = internal_tag

    def parse(self, text: str) -> DeclarationFile:
        tokens = tokenize(text)
        spans = split_statements(text, tokens)
        if not spans:
            return DeclarationFile(header=text)

        header = ""
        statements: list[Statement] = []
        starts = [t.start for t in tokens]
        previous_end = 0
        for position, span in enumerate(spans):
            leading = text[previous_end : span.start]
            if position == 0:
                header, leading = _split_header(leading)
            leading_start = len(header) if position == 0 else previous_end
            leading_comments = _comments_between(tokens, starts, leading_start, span.start)
            statements.append(self._build(text, span, leading, leading_comments))
            previous_end = span.end

        return DeclarationFile(statements=statements, header=header, trailer=text[previous_end:])

    def _build(
        self,
        text: str,
        span: StatementSpan,
        leading: str,
        leading_comments: list[Token],
    ) -> Statement:
        source = text[span.start : span.end]
        base = {"text": source, "leading": leading, "line": span.tokens[0].line}
        try:
            if span.is_import:
                return self._parse_import(span, base)
            if span.head == "export":
                exported = self._parse_export_form(span, base, leading_comments)
                if exported is not None:
                    return exported
            return self._parse_declaration(span, base, leading_comments)
        except (_Unrecognized, IndexError):
            return self._opaque(span, base, leading_comments)

    def _is_internal(self, span: StatementSpan, leading_comments: list[Token], until: int) -> bool:
        inline = [c for c in span.comments if c.start < until]
        return find_internal_marker(leading_comments, inline, self.internal_tag).matched

    def _exported_visibility(self, internal: bool) -> Visibility:
        return Visibility.INTERNAL_EXPORTED if internal else Visibility.PUBLIC

    def _opaque(self, span: StatementSpan, base: dict, leading_comments: list[Token]) -> Statement:
        references, local_names = extract_references(span.tokens)
        exported = span.head == "export"
        visibility = Visibility.NON_EXPORTED
        if exported:
            internal = self._is_internal(span, leading_comments, span.end)
            visibility = self._exported_visibility(internal)
        binds: set[str] = set()
        if span.is_import:
            # Best effort: everything between "import" and "from"
            for tok in span.tokens[1:]:
                if tok.value == "from":
                    break
                if tok.kind is TokenKind.IDENTIFIER and tok.value not in KEYWORDS:
                    binds.add(tok.value)
            references = set()
        return Statement(
            kind=StatementKind.OTHER,
            binds=binds,
            references=references - binds,
            local_names=local_names,
            visibility=visibility,
            opaque=True,
            **base,
        )

    # === Imports ===

    def _parse_import(self, span: StatementSpan, base: dict) -> ImportStatement:
        toks = span.tokens
        semicolon = toks[-1].is_punct(";")
        end = len(toks) - 1 if semicolon else len(toks)
        pos = 1
        type_only = False
        if toks[pos].value == "type" and toks[pos + 1].kind is not TokenKind.STRING and not (
            toks[pos + 1].value in ("from", ",") or toks[pos + 1].is_punct("=")
        ):
            type_only = True
            pos += 1

        if toks[pos].kind is TokenKind.STRING:
            return ImportStatement(
                kind=StatementKind.IMPORT,
                module_specifier=_unquote(toks[pos]),
                quote=toks[pos].value[0],
                semicolon=semicolon,
                declared_kind="import",
                **base,
            )

        if toks[pos].kind is TokenKind.IDENTIFIER and toks[pos + 1].is_punct("="):
            local = toks[pos].value
            module, references = self._parse_equals_target(toks[pos + 2 : end])
            return ImportStatement(
                kind=StatementKind.IMPORT,
                default_name=local,
                equals=True,
                module_specifier=module,
                binds={local},
                references=references,
                type_only=type_only,
                semicolon=semicolon,
                declared_kind="import",
                **base,
            )

        default_name = None
        namespace_name = None
        specifiers: list[ImportSpecifier] = []
        padded = False
        if toks[pos].kind is TokenKind.IDENTIFIER and toks[pos].value != "from":
            default_name = toks[pos].value
            pos += 1
            if toks[pos].is_punct(","):
                pos += 1
        if toks[pos].is_punct("*"):
            if toks[pos + 1].value != "as" or toks[pos + 2].kind is not TokenKind.IDENTIFIER:
                raise _Unrecognized("namespace import")
            namespace_name = toks[pos + 2].value
            pos += 3
        elif toks[pos].is_punct("{"):
            padded = base["text"][toks[pos].end - span.start : toks[pos].end - span.start + 1].isspace()
            specifiers, pos = self._parse_specifiers(toks, pos)

        if toks[pos].value != "from":
            raise _Unrecognized("import without from")
        module_tok = toks[pos + 1]
        statement = ImportStatement(
            kind=StatementKind.IMPORT,
            module_specifier=_unquote(module_tok),
            quote=module_tok.value[0],
            default_name=default_name,
            namespace_name=namespace_name,
            specifiers=specifiers,
            type_only=type_only,
            padded_braces=padded,
            semicolon=semicolon,
            declared_kind="import",
            **base,
        )
        statement.binds = statement.bound_names
        return statement

    def _parse_specifiers(self, toks: list[Token], pos: int) -> tuple[list[ImportSpecifier], int]:
        """Parse ``{ a, type b as c }`` starting at the opening brace."""
        specifiers: list[ImportSpecifier] = []
        pos += 1
        while not toks[pos].is_punct("}"):
            is_type = False
            if toks[pos].value == "type" and not (
                toks[pos + 1].is_punct(",", "}") or toks[pos + 1].value == "as"
            ):
                is_type = True
                pos += 1
            imported_tok = toks[pos]
            if imported_tok.kind not in (TokenKind.IDENTIFIER, TokenKind.STRING):
                raise _Unrecognized(imported_tok.value)
            local = imported_tok.value
            pos += 1
            if toks[pos].value == "as":
                local = toks[pos + 1].value
                pos += 2
            specifiers.append(ImportSpecifier(imported=imported_tok.value, local=local, is_type=is_type))
            if toks[pos].is_punct(","):
                pos += 1
            elif not toks[pos].is_punct("}"):
                raise _Unrecognized(toks[pos].value)
        return specifiers, pos + 1

    def _parse_equals_target(self, toks: list[Token]) -> tuple[str, set[str]]:
        """``require('m')`` or an entity name ``A.B.C``."""
        if toks[0].value == "require" and toks[1].is_punct("("):
            return _unquote(toks[2]), set()
        if toks[0].kind is not TokenKind.IDENTIFIER:
            raise _Unrecognized(toks[0].value)
        return "", {toks[0].value}

    # === Export forms without a declaration ===

    def _parse_export_form(
        self,
        span: StatementSpan,
        base: dict,
        leading_comments: list[Token],
    ) -> Statement | None:
        toks = span.tokens
        second = toks[1]
        pos = 1
        if second.value == "type" and toks[2].is_punct("{"):
            pos = 2

        references: set[str] = set()
        binds: set[str] = set()
        kind = StatementKind.OTHER
        declared_kind = "export"

        if toks[pos].is_punct("{"):
            specifiers, after = self._parse_specifiers(toks, pos)
            reexport = after < len(toks) and toks[after].value == "from"
            if not reexport:
                references = {s.imported for s in specifiers if s.imported != "default"}
        elif second.is_punct("*"):
            pass
        elif second.is_punct("="):
            references, _ = extract_references(toks[2:])
        elif second.value == "as" and toks[2].value == "namespace":
            pass
        elif (
            second.value == "default"
            and toks[2].kind is TokenKind.IDENTIFIER
            and toks[2].value not in DECLARATION_KEYWORDS | MODIFIERS
        ):
            references, _ = extract_references(toks[2:])
        elif second.value == "import":
            local = toks[2]
            if local.kind is not TokenKind.IDENTIFIER or not toks[3].is_punct("="):
                raise _Unrecognized("export import")
            end = len(toks) - 1 if toks[-1].is_punct(";") else len(toks)
            _, references = self._parse_equals_target(toks[4:end])
            binds = {local.value}
            kind = StatementKind.EXPORTED_DECLARATION
            declared_kind = "import"
        else:
            return None

        internal = self._is_internal(span, leading_comments, toks[pos].start)
        return Statement(
            kind=kind,
            binds=binds,
            references=references,
            visibility=self._exported_visibility(internal),
            declared_kind=declared_kind,
            **base,
        )

    # === Declarations ===

    def _parse_declaration(
        self,
        span: StatementSpan,
        base: dict,
        leading_comments: list[Token],
    ) -> Statement:
        toks = span.tokens
        pos = 0
        exported = False
        while toks[pos].kind is TokenKind.IDENTIFIER and toks[pos].value in MODIFIERS:
            exported = exported or toks[pos].value == "export"
            pos += 1

        keyword = toks[pos].value
        if keyword == "const" and toks[pos + 1].value == "enum":
            pos += 1
            keyword = "enum"
        if toks[pos].kind is not TokenKind.IDENTIFIER:
            raise _Unrecognized(keyword)

        name_indices: list[int] = []
        augmentation = False
        if keyword in ("class", "interface", "type", "enum", "function"):
            name_pos = pos + 1
            if keyword == "function" and toks[name_pos].is_punct("*"):
                name_pos += 1
            candidate = toks[name_pos]
            if candidate.kind is TokenKind.IDENTIFIER and candidate.value not in ("extends", "implements"):
                name_indices = [name_pos]
            elif not exported:
                raise _Unrecognized(f"anonymous {keyword}")
        elif keyword in ("namespace", "module"):
            candidate = toks[pos + 1]
            if candidate.kind is TokenKind.STRING:
                augmentation = True
            elif candidate.kind is TokenKind.IDENTIFIER:
                name_indices = [pos + 1]
            else:
                raise _Unrecognized(keyword)
        elif keyword == "global":
            augmentation = True
        elif keyword in ("const", "let", "var"):
            name_indices = _declarator_indices(toks, pos + 1)
        else:
            raise _Unrecognized(keyword)

        names = set(name_indices)
        references, local_names = extract_references(toks, names, enum_body=keyword == "enum")
        binds = {toks[i].value for i in name_indices}

        marker_until = toks[name_indices[0]].start if name_indices else toks[pos].end
        internal = self._is_internal(span, leading_comments, marker_until)
        if exported or augmentation:
            visibility = self._exported_visibility(internal)
        else:
            visibility = Visibility.NON_EXPORTED

        return Statement(
            kind=StatementKind.EXPORTED_DECLARATION if exported else StatementKind.AMBIENT_DECLARATION,
            binds=binds,
            references=references - binds,
            local_names=local_names,
            visibility=visibility,
            declared_kind=keyword,
            **base,
        )


def _declarator_indices(toks: list[Token], pos: int) -> list[int]:
    """Indices of the names declared by ``const a: A, b: B``."""
    indices: list[int] = []
    depth = 0
    expect_name = True
    for index in range(pos, len(toks)):
        tok = toks[index]
        if expect_name and depth == 0:
            if tok.kind is not TokenKind.IDENTIFIER:
                raise _Unrecognized("destructuring declaration")
            indices.append(index)
            expect_name = False
            continue
        if tok.is_punct("(", "[", "{", "<"):
            depth += 1
        elif tok.is_punct(")", "]", "}", ">"):
            depth -= 1
        elif depth == 0 and tok.is_punct(","):
            expect_name = True
    if not indices:
        raise _Unrecognized("declaration without names")
    return indices


def _split_header(trivia: str) -> tuple[str, str]:
    """Separate file-level comments from the first statement's own trivia.

    Everything up to the last blank line is file header. Below it, the
    first statement keeps only its own doc comment (the last ``/** */``
    block) and what follows it. Triple-slash directives and comments tagged
    ``@license`` or ``@packageDocumentation`` always belong to the header.
    """
    header = ""
    matches = list(BLANK_LINE.finditer(trivia))
    if matches:
        cut = matches[-1].end()
        header, trivia = trivia[:cut], trivia[cut:]

    comments: list[str] = []
    ends: list[int] = []
    match = TRIVIA_COMMENT.match(trivia)
    while match:
        comments.append(match.group(1))
        ends.append(match.end())
        match = TRIVIA_COMMENT.match(trivia, match.end())

    count = 0
    for index, comment in enumerate(comments):
        if comment.startswith("///") or FILE_COMMENT_TAG.search(comment):
            count = index + 1
    for index in range(len(comments) - 1, count - 1, -1):
        if comments[index].startswith("/**"):
            count = index
            break

    if count == 0:
        return header, trivia
    cut = ends[count - 1]
    return header + trivia[:cut], trivia[cut:]


def parse_declarations(text: str, internal_tag: str = DEFAULT_INTERNAL_TAG) -> DeclarationFile:
    """Parse declaration text into a :class:`DeclarationFile`.

    Raises:
        ParseError: If the text cannot be tokenized or split into statements.
    """
    return DeclarationParser(internal_tag).parse(text)
