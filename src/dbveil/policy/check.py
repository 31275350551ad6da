"""Static checks for a policy document, reported as diagnostics."""

from __future__ import annotations

import re
from collections.abc import Mapping
from pathlib import Path

import sqlglot

from dbveil.diagnostics import CheckResult, Diagnostic, codes
from dbveil.errors import ConfigFormatError, ConfigNotFoundError
from dbveil.policy.placeholders import count_placeholders
from dbveil.policy.resolve import (
    COLUMNS_KEY,
    STATEMENT_NAMESPACE,
    ConfigSource,
    load_config,
    resolve,
)

_REPEATED_WHITESPACE = re.compile(r"\s{2,}|[\t\r\n]")


def check_config(source: ConfigSource, *, name: str | None = None) -> CheckResult:
    """Validate a policy document without touching a database.

    Steps:
        1. Load the document (unreadable → error, stop)
        2. Resolve every configured statement (schema errors → error)
        3. Compare configured ordinals with the statement's ``?`` placeholders
        4. Flag SQL keys whose whitespace makes exact matching fragile
    """
    result = CheckResult(source=name or _describe(source))

    try:
        config = load_config(source)
    except ConfigNotFoundError as e:
        result.diagnostics.append(Diagnostic.error(codes.CONFIG_UNREADABLE, str(e)))
        return result
    except ConfigFormatError as e:
        result.diagnostics.append(Diagnostic.error(codes.CONFIG_FORMAT, str(e)))
        return result

    namespace = config.get(STATEMENT_NAMESPACE)
    if namespace is None:
        result.diagnostics.append(
            Diagnostic.info(
                codes.NAMESPACE_MISSING, f"no '{STATEMENT_NAMESPACE}' section; nothing is protected"
            )
        )
        return result
    if not isinstance(namespace, Mapping):
        result.diagnostics.append(
            Diagnostic.error(codes.CONFIG_FORMAT, f"'{STATEMENT_NAMESPACE}' must be a JSON object")
        )
        return result

    for sql, entry in namespace.items():
        result.statements += 1
        result.diagnostics.extend(_check_statement(config, sql, entry, result))

    return result


def _check_statement(
    config: Mapping, sql: str, entry: object, result: CheckResult
) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []

    try:
        policy = resolve(config, sql)
    except ConfigFormatError as e:
        return [Diagnostic.error(codes.CONFIG_FORMAT, str(e)).at(sql)]

    if isinstance(entry, Mapping) and COLUMNS_KEY not in entry:
        diagnostics.append(
            Diagnostic.warning(
                codes.COLUMNS_MISSING, f"statement has no '{COLUMNS_KEY}'; nothing is protected"
            ).at(sql)
        )

    result.protected_columns += len(policy)

    if sql != sql.strip() or _REPEATED_WHITESPACE.search(sql):
        diagnostics.append(
            Diagnostic.warning(
                codes.WHITESPACE_SENSITIVE, "SQL key has leading, trailing or repeated whitespace"
            )
            .at(sql)
            .note("statements match the key character for character")
        )

    try:
        placeholders = count_placeholders(sql)
    except sqlglot.errors.TokenError as e:
        diagnostics.append(
            Diagnostic.error(codes.SQL_UNTOKENIZABLE, f"SQL key cannot be tokenized: {e}").at(sql)
        )
        return diagnostics

    if placeholders == 0:
        diagnostics.append(
            Diagnostic.warning(codes.NO_PLACEHOLDERS, "statement has no '?' placeholders")
            .at(sql)
            .note("only positional '?' parameters can be protected")
        )

    for ordinal, column in policy.columns.items():
        if ordinal > placeholders:
            diagnostics.append(
                Diagnostic.warning(
                    codes.ORDINAL_OUT_OF_RANGE,
                    f"ordinal {ordinal} exceeds the statement's {placeholders} placeholder(s)",
                )
                .at(sql, ordinal)
                .note("this policy can never be applied")
            )
        if not column:
            diagnostics.append(
                Diagnostic.info(
                    codes.EMPTY_ATTRIBUTES, "column is protected with no key attributes"
                ).at(sql, ordinal)
            )

    return diagnostics


def _describe(source: ConfigSource) -> str:
    if isinstance(source, Path):
        return str(source)
    if isinstance(source, Mapping):
        return "<mapping>"
    return "<document>"
