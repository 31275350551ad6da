"""Positional placeholder discovery using the sqlglot tokenizer."""

from __future__ import annotations

import sqlglot
from sqlglot.tokens import TokenType


def placeholder_offsets(sql: str) -> list[int]:
    """Character offsets of every ``?`` placeholder, in statement order.

    Question marks inside string literals, quoted identifiers and comments are
    not placeholders and are skipped by the tokenizer.

    Raises sqlglot.errors.TokenError on untokenizable SQL (e.g. an unterminated
    string literal).
    """
    return [
        token.start
        for token in sqlglot.tokenize(sql)
        if token.token_type == TokenType.PLACEHOLDER and token.text == "?"
    ]


def count_placeholders(sql: str) -> int:
    return len(placeholder_offsets(sql))


def to_format_style(sql: str) -> str:
    """Rewrite ``?`` placeholders to ``%s`` and escape literal ``%`` as ``%%``."""
    offsets = set(placeholder_offsets(sql))
    out: list[str] = []
    for i, ch in enumerate(sql):
        if i in offsets:
            out.append("%s")
        elif ch == "%":
            out.append("%%")
        else:
            out.append(ch)
    return "".join(out)
