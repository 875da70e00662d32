"""Classify the operation kind of a GraphQL query by its leading keyword."""

from __future__ import annotations

from graphql.error import GraphQLSyntaxError
from graphql.language import TokenKind

from graph_analytics.commands.enrich.graphql_utils import iter_tokens

OPERATION_KINDS = ("query", "mutation", "subscription")


def classify_operation(query: str, operation_name: str | None = None) -> str:
    """Return "query", "mutation", "subscription", or "" when undetermined.

    Purely syntactic: a top-level selection set with no keyword is the
    query shorthand, otherwise the operation keyword wins. Fragment
    definitions are skipped. When ``operation_name`` matches a named
    operation its keyword is used, otherwise the first operation decides.
    Never raises.
    """
    try:
        operations = _scan_operations(query)
    except GraphQLSyntaxError:
        return ""

    if not operations:
        return ""
    if operation_name:
        for kind, name in operations:
            if name == operation_name:
                return kind
    return operations[0][0]


def _scan_operations(query: str) -> list[tuple[str, str | None]]:
    """List (kind, name) for each top-level operation, in document order."""
    operations: list[tuple[str, str | None]] = []
    depth = 0
    parens = 0  # variable definitions may carry object default values
    keyword: str | None = None
    name: str | None = None
    expect_name = False

    for token in iter_tokens(query):
        kind = token.kind
        if depth == 0 and kind == TokenKind.PAREN_L:
            parens += 1
        elif depth == 0 and kind == TokenKind.PAREN_R:
            parens -= 1
        elif parens:
            continue
        elif kind == TokenKind.BRACE_L:
            if depth == 0:
                if keyword is None:
                    operations.append(("query", None))
                elif keyword in OPERATION_KINDS:
                    operations.append((keyword, name))
            depth += 1
        elif kind == TokenKind.BRACE_R:
            depth -= 1
            if depth == 0:
                keyword = name = None
        elif depth == 0 and kind == TokenKind.NAME:
            if keyword is None:
                keyword = token.value
                expect_name = True
                continue
            if expect_name:
                name = token.value
        expect_name = False

    return operations
