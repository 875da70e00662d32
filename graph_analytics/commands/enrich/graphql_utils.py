"""GraphQL text utilities shared by the schema walker and the classifier.

Gateways accept empty argument lists such as ``listCharacters()`` both in
SDL and in queries, which graphql-core rejects. ``strip_empty_arguments``
removes them token-wise (so string literals are never touched) before
parsing.
"""

from __future__ import annotations

from collections.abc import Iterator

from graphql import parse as gql_parse
from graphql.language import DocumentNode, Lexer, Source, Token, TokenKind


def iter_tokens(text: str) -> Iterator[Token]:
    """Yield the significant tokens of a GraphQL document (comments skipped).

    Raises GraphQLSyntaxError on lexically invalid input.
    """
    lexer = Lexer(Source(text))
    token = lexer.advance()
    while token.kind != TokenKind.EOF:
        yield token
        token = lexer.advance()


def strip_empty_arguments(text: str) -> str:
    """Remove every ``()`` pair that encloses no arguments.

    >>> strip_empty_arguments("{ listCharacters() { id } }")
    '{ listCharacters { id } }'
    """
    spans: list[tuple[int, int]] = []
    previous: Token | None = None
    for token in iter_tokens(text):
        if (
            previous is not None
            and previous.kind == TokenKind.PAREN_L
            and token.kind == TokenKind.PAREN_R
        ):
            spans.append((previous.start, token.end))
        previous = token

    if not spans:
        return text
    parts: list[str] = []
    cursor = 0
    for start, end in spans:
        parts.append(text[cursor:start])
        cursor = end
    parts.append(text[cursor:])
    return "".join(parts)


def parse_document(text: str) -> DocumentNode:
    """Parse a query or SDL document, tolerating empty argument lists.

    Raises GraphQLSyntaxError when the text is not valid GraphQL.
    """
    return gql_parse(strip_empty_arguments(text), no_location=True)
