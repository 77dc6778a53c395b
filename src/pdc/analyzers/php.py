# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""PHP source extractor implementation.

The extractor does not parse PHP. It tokenizes just enough of the language to
find class-like bodies, the methods declared inside them, their parameter lists
and the doc comments placed directly above them.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from pdc.analyzer import ClassDeclaration, DeclarationKind, MethodDeclaration, ParseError

logger = logging.getLogger(__name__)

TokenKind = Literal[
    "inline_html",
    "open_tag",
    "close_tag",
    "whitespace",
    "comment",
    "doc_comment",
    "attribute",
    "variable",
    "identifier",
    "string",
    "number",
    "punct",
]

_IDENT = r"[a-zA-Z_\x7f-\U0010ffff][a-zA-Z0-9_\x7f-\U0010ffff]*"
_IDENT_RE = re.compile(_IDENT)
_NAME_RE = re.compile(rf"\\?{_IDENT}(?:\\{_IDENT})*")
_VARIABLE_RE = re.compile(rf"\${_IDENT}")
_WHITESPACE_RE = re.compile(r"\s+")
_NUMBER_RE = re.compile(
    r"0[xXbBoO][0-9a-fA-F_]+|(?:\d[\d_]*(?:\.[\d_]*)?|\.\d[\d_]*)(?:[eE][+-]?\d+)?"
)
_OPEN_TAG_RE = re.compile(r"<\?php(?=\s|$)|<\?=", re.IGNORECASE)
_HEREDOC_RE = re.compile(rf"<<<[ \t]*(['\"]?)({_IDENT})\1\r?\n")
_MULTI_CHAR_PUNCT = ("?->", "::", "->", "=>")

_TRIVIA: frozenset[str] = frozenset(
    {"inline_html", "open_tag", "close_tag", "whitespace", "comment", "doc_comment", "attribute"}
)
_CLASS_KEYWORDS: frozenset[str] = frozenset({"class", "interface", "trait", "enum"})
_MODIFIERS: frozenset[str] = frozenset(
    {"abstract", "final", "public", "protected", "private", "static", "readonly", "var"}
)
_MEMBER_ACCESS: frozenset[str] = frozenset({"::", "->", "?->"})


@dataclass(frozen=True)
class Token:
    """Represent one lexeme.

    Attributes:
        kind: Token category.
        text: Exact source text.
        line: Line of the first character (1-based).
        end_line: Line of the last character (1-based).
        offset: Offset of the first character in the source.
    """

    kind: TokenKind
    text: str
    line: int
    end_line: int
    offset: int


class _Lexer:
    """Split PHP source into tokens with line information."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._line = 1
        self._tokens: list[Token] = []

    def run(self) -> list[Token]:
        while self._pos < len(self._source):
            self._lex_inline_html()
            self._lex_php()
        return self._tokens

    def _emit(self, kind: TokenKind, end: int) -> None:
        text = self._source[self._pos : end]
        start_line = self._line
        end_line = start_line + text.count("\n")
        self._line = end_line
        if text.endswith("\n"):
            end_line -= 1
        self._tokens.append(
            Token(kind=kind, text=text, line=start_line, end_line=end_line, offset=self._pos)
        )
        self._pos = end

    def _fail(self, what: str) -> ParseError:
        return ParseError(f"Unterminated {what} starting on line {self._line}")

    def _lex_inline_html(self) -> None:
        match = _OPEN_TAG_RE.search(self._source, self._pos)
        if match is None:
            self._emit("inline_html", len(self._source))
            return
        if match.start() > self._pos:
            self._emit("inline_html", match.start())
        self._emit("open_tag", match.end())

    def _lex_php(self) -> None:
        source = self._source
        while self._pos < len(source):
            pos = self._pos
            char = source[pos]
            if source.startswith("?>", pos):
                self._emit("close_tag", pos + 2)
                return
            if char.isspace():
                self._emit("whitespace", _WHITESPACE_RE.match(source, pos).end())
            elif source.startswith("#[", pos):
                self._emit("attribute", self._scan_attribute(pos))
            elif char == "#" or source.startswith("//", pos):
                self._emit("comment", self._scan_line_comment(pos))
            elif source.startswith("/*", pos):
                end = source.find("*/", pos + 2)
                if end == -1:
                    raise self._fail("comment")
                # "/**" must be followed by whitespace; "/**/" is a plain comment.
                is_doc = source.startswith("/**", pos) and source[pos + 3 : pos + 4].isspace()
                self._emit("doc_comment" if is_doc else "comment", end + 2)
            elif char == "$" and _VARIABLE_RE.match(source, pos):
                self._emit("variable", _VARIABLE_RE.match(source, pos).end())
            elif char in "'\"`":
                self._emit("string", self._scan_quoted(pos))
            elif source.startswith("<<<", pos) and _HEREDOC_RE.match(source, pos):
                self._emit("string", self._scan_heredoc(pos))
            elif _NAME_RE.match(source, pos):
                self._emit("identifier", _NAME_RE.match(source, pos).end())
                if self._tokens[-1].text.lower() == "__halt_compiler":
                    # Everything after __halt_compiler() is raw data.
                    self._emit("inline_html", len(source))
                    return
            elif _NUMBER_RE.match(source, pos):
                self._emit("number", _NUMBER_RE.match(source, pos).end())
            else:
                width = next(
                    (len(p) for p in _MULTI_CHAR_PUNCT if source.startswith(p, pos)), 1
                )
                self._emit("punct", pos + width)

    def _scan_line_comment(self, start: int) -> int:
        ends = [
            index
            for index in (self._source.find("\n", start), self._source.find("?>", start))
            if index != -1
        ]
        return min(ends) if ends else len(self._source)

    def _scan_quoted(self, start: int) -> int:
        """Return the offset just past the string literal opened at ``start``."""
        source = self._source
        quote = source[start]
        index = start + 1
        while index < len(source):
            char = source[index]
            if char == "\\":
                index += 2
                continue
            if char == quote:
                return index + 1
            if quote != "'" and char == "{" and source.startswith("$", index + 1):
                index = self._scan_braced(index)
                continue
            if quote != "'" and char == "$" and source.startswith("{", index + 1):
                index = self._scan_braced(index + 1)
                continue
            index += 1
        raise self._fail("string")

    def _scan_braced(self, start: int) -> int:
        # Interpolated expression inside a string; may itself contain strings.
        source = self._source
        depth = 0
        index = start
        while index < len(source):
            char = source[index]
            if char in "'\"":
                index = self._scan_quoted(index)
                continue
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return index + 1
            index += 1
        raise self._fail("string interpolation")

    def _scan_heredoc(self, start: int) -> int:
        opening = _HEREDOC_RE.match(self._source, start)
        label = re.escape(opening.group(2))
        closing = re.compile(rf"^[ \t]*{label}(?![a-zA-Z0-9_\x7f-\U0010ffff])", re.MULTILINE)
        match = closing.search(self._source, opening.end())
        if match is None:
            raise self._fail("heredoc")
        return match.end()

    def _scan_attribute(self, start: int) -> int:
        source = self._source
        depth = 0
        index = start + 1
        while index < len(source):
            char = source[index]
            if char in "'\"":
                index = self._scan_quoted(index)
                continue
            if char == "[":
                depth += 1
            elif char == "]":
                depth -= 1
                if depth == 0:
                    return index + 1
            index += 1
        raise self._fail("attribute")


def tokenize(source: str) -> list[Token]:
    """Split PHP source into tokens.

    Args:
        source: Full file content.

    Returns:
        Tokens in source order, trivia included.

    Raises:
        ParseError: If a comment, string, heredoc or attribute is unterminated.
    """
    return _Lexer(source).run()


@dataclass
class _OpenScope:
    name: str
    kind: DeclarationKind
    start_line: int
    docblock: str | None
    body_depth: int
    records_methods: bool = True
    methods: list[MethodDeclaration] = field(default_factory=list)

    def build(self) -> ClassDeclaration:
        return ClassDeclaration(
            name=self.name,
            kind=self.kind,
            start_line=self.start_line,
            docblock=self.docblock,
            methods=tuple(self.methods),
        )


class _StructureScanner:
    """Walk significant tokens, tracking braces to scope methods to classes."""

    def __init__(self, source: str, tokens: list[Token]) -> None:
        self._source = source
        self._tokens = tokens
        self._code = [
            index for index, token in enumerate(tokens) if token.kind not in _TRIVIA
        ]

    def scan(self) -> dict[str, ClassDeclaration]:
        opened: list[_OpenScope] = []
        scopes: list[_OpenScope] = []
        depth = 0
        pos = 0
        while pos < len(self._code):
            token = self._token(pos)
            if token.kind == "punct" and token.text == "{":
                depth += 1
            elif token.kind == "punct" and token.text == "}":
                depth -= 1
                if depth < 0:
                    raise ParseError(f"Unmatched '}}' on line {token.line}")
                if scopes and depth < scopes[-1].body_depth:
                    scopes.pop()
            elif token.kind == "identifier":
                keyword = token.text.lower()
                if keyword in _CLASS_KEYWORDS and self._declares_class(pos, keyword):
                    scope, pos = self._open_class(pos, keyword, depth)
                    scopes.append(scope)
                    if scope.records_methods:
                        opened.append(scope)
                    continue
                if keyword == "function" and not self._follows_member_access(pos):
                    if self._follows_use(pos):
                        # "use function Foo\bar;" imports a function.
                        pos += 1
                        continue
                    pos = self._read_function(pos, scopes)
                    continue
            pos += 1

        if scopes:
            scope = scopes[-1]
            raise ParseError(
                f"Unexpected end of file inside {scope.kind} {scope.name or '(anonymous)'} "
                f"opened on line {scope.start_line}"
            )

        classes: dict[str, ClassDeclaration] = {}
        for scope in opened:
            classes[scope.name] = scope.build()
        return classes

    def _token(self, pos: int) -> Token:
        return self._tokens[self._code[pos]]

    def _peek(self, pos: int) -> Token | None:
        if 0 <= pos < len(self._code):
            return self._token(pos)
        return None

    def _follows_member_access(self, pos: int) -> bool:
        previous = self._peek(pos - 1)
        return previous is not None and previous.text in _MEMBER_ACCESS

    def _follows_use(self, pos: int) -> bool:
        previous = self._peek(pos - 1)
        return previous is not None and previous.kind == "identifier" and (
            previous.text.lower() == "use"
        )

    def _is_anonymous_class(self, pos: int, keyword: str) -> bool:
        previous = self._peek(pos - 1)
        return keyword == "class" and previous is not None and previous.text.lower() == "new"

    def _declares_class(self, pos: int, keyword: str) -> bool:
        if self._follows_member_access(pos):
            return False
        if self._is_anonymous_class(pos, keyword):
            return True
        following = self._peek(pos + 1)
        if following is None or following.kind != "identifier" or "\\" in following.text:
            return False
        if keyword == "enum":
            after = self._peek(pos + 2)
            return after is not None and (
                after.text in ("{", ":") or after.text.lower() == "implements"
            )
        return True

    def _open_class(self, pos: int, keyword: str, depth: int) -> tuple[_OpenScope, int]:
        keyword_token = self._token(pos)
        anonymous = self._is_anonymous_class(pos, keyword)
        name = "" if anonymous else self._token(pos + 1).text
        scope = _OpenScope(
            name=name,
            kind=keyword,
            start_line=keyword_token.line,
            docblock=None if anonymous else self._docblock_for(self._code[pos]),
            body_depth=depth + 1,
            records_methods=not anonymous,
        )
        return scope, self._find_body(pos + 1, scope)

    def _find_body(self, pos: int, scope: _OpenScope) -> int:
        # Returns the position of the opening brace, skipping constructor arguments.
        parens = 0
        while pos < len(self._code):
            token = self._token(pos)
            if token.kind == "punct":
                if token.text == "(":
                    parens += 1
                elif token.text == ")":
                    parens -= 1
                elif parens == 0 and token.text == "{":
                    return pos
                elif parens == 0 and token.text == ";":
                    break
            pos += 1
        raise ParseError(
            f"Missing body for {scope.kind} {scope.name or '(anonymous)'} "
            f"on line {scope.start_line}"
        )

    def _read_function(self, pos: int, scopes: list[_OpenScope]) -> int:
        keyword_index = self._code[pos]
        keyword_token = self._token(pos)
        name_pos = pos + 1
        name_token = self._peek(name_pos)
        if name_token is not None and name_token.text == "&":
            name_pos += 1
            name_token = self._peek(name_pos)
        if name_token is None or name_token.kind != "identifier":
            # Closure; its body braces are tracked by the caller.
            return pos + 1

        open_pos = name_pos + 1
        open_token = self._peek(open_pos)
        if open_token is None or open_token.text != "(":
            if not (scopes and scopes[-1].records_methods):
                # Group imports such as "use Foo\{function bar}" outside a class.
                return name_pos + 1
            raise ParseError(
                f"Expected parameter list for function {name_token.text} "
                f"on line {keyword_token.line}"
            )
        close_pos = self._match_paren(open_pos)
        if scopes and scopes[-1].records_methods:
            scopes[-1].methods.append(
                MethodDeclaration(
                    name=name_token.text,
                    start_line=keyword_token.line,
                    signature=self._source[
                        open_token.offset + 1 : self._token(close_pos).offset
                    ],
                    docblock=self._docblock_for(keyword_index),
                )
            )
        return close_pos + 1

    def _match_paren(self, pos: int) -> int:
        depth = 0
        start_line = self._token(pos).line
        while pos < len(self._code):
            token = self._token(pos)
            if token.kind == "punct" and token.text == "(":
                depth += 1
            elif token.kind == "punct" and token.text == ")":
                depth -= 1
                if depth == 0:
                    return pos
            pos += 1
        raise ParseError(f"Unterminated parameter list starting on line {start_line}")

    def _docblock_for(self, index: int) -> str | None:
        """Return the doc comment directly above the token at ``index``.

        Modifiers and attribute groups between the doc comment and the keyword
        are skipped. The doc comment must end on the line of, or the line just
        above, the earliest skipped token.
        """
        expected_line = self._tokens[index].line
        for cursor in range(index - 1, -1, -1):
            token = self._tokens[cursor]
            if token.kind == "whitespace":
                continue
            if token.kind == "doc_comment":
                return token.text if token.end_line >= expected_line - 1 else None
            if token.kind == "attribute" or (
                token.kind == "identifier" and token.text.lower() in _MODIFIERS
            ):
                expected_line = token.line
                continue
            return None
        return None


def extract_classes(source: str) -> dict[str, ClassDeclaration]:
    """Extract class-like declarations from PHP source.

    Args:
        source: Full file content.

    Returns:
        Declarations keyed by name in declaration order. A repeated name
        replaces the earlier declaration.

    Raises:
        ParseError: If the source cannot be tokenized or a body is unbalanced.
    """
    return _StructureScanner(source, tokenize(source)).scan()


class PhpExtractor:
    """Extract class and method declarations from PHP files."""

    def extract_file(self, file_path: Path) -> dict[str, ClassDeclaration]:
        """Read and extract one PHP file.

        Args:
            file_path: File to read.

        Returns:
            Declarations keyed by class name.

        Raises:
            ParseError: If the file cannot be read, decoded or tokenized.
        """
        try:
            source = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ParseError(f"Unable to read file: {exc}") from exc
        classes = extract_classes(source)
        logger.debug(f"Extracted declarations (file_path={file_path} classes={len(classes)})")
        return classes
