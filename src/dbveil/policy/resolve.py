"""Policy document loading and exact-SQL resolution."""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Mapping
from pathlib import Path

from dbveil.errors import ConfigFormatError, ConfigNotFoundError
from dbveil.policy._types import ColumnProtectionPolicy, StatementPolicyMap

logger = logging.getLogger(__name__)

STATEMENT_NAMESPACE = "PreparedStatement"
COLUMNS_KEY = "IonicColumns"
CATTRS_KEY = "cattrs"

ConfigSource = str | bytes | Path | Mapping | None


def load_config(source: ConfigSource) -> Mapping:
    """Load a policy document from JSON text, a file path, or a parsed mapping.

    ``None`` stands for "no policy configured" and yields an empty document.
    """
    if source is None:
        return {}
    if isinstance(source, Mapping):
        return source
    if isinstance(source, Path):
        try:
            source = source.read_text()
        except OSError as e:
            raise ConfigNotFoundError(f"cannot read policy file {source}: {e}") from e
    try:
        document = json.loads(source)
    except (ValueError, TypeError) as e:
        raise ConfigNotFoundError(f"policy document is not valid JSON: {e}") from e
    if not isinstance(document, Mapping):
        raise ConfigFormatError("policy document root must be a JSON object")
    return document


def resolve(config: Mapping, sql: str) -> StatementPolicyMap:
    """Return the ordinal → policy map configured for exactly ``sql``.

    Matching is by literal string equality: no normalization of case or
    whitespace. A missing namespace or SQL entry is not an error.
    """
    if not isinstance(config, Mapping):
        raise ConfigFormatError("policy document root must be a JSON object")

    namespace = config.get(STATEMENT_NAMESPACE)
    if namespace is None:
        return StatementPolicyMap(sql)
    _require_object(namespace, f"'{STATEMENT_NAMESPACE}'")

    entry = namespace.get(sql)
    if entry is None:
        return StatementPolicyMap(sql)
    _require_object(entry, f"policy for statement {sql!r}")

    columns = entry.get(COLUMNS_KEY)
    if columns is None:
        return StatementPolicyMap(sql)
    _require_object(columns, f"'{COLUMNS_KEY}' of statement {sql!r}")

    policies: dict[int, ColumnProtectionPolicy] = {}
    for key, column in columns.items():
        ordinal = parse_ordinal(key)
        if ordinal in policies:
            raise ConfigFormatError(f"ordinal {ordinal} is configured twice for statement {sql!r}")
        _require_object(column, f"column {key!r} of statement {sql!r}")
        policies[ordinal] = _column_policy(column.get(CATTRS_KEY), where=f"column {key!r}")

    logger.debug("resolved %d protected ordinal(s) for %r", len(policies), sql)
    return StatementPolicyMap(sql, policies)


def parse_ordinal(key: object) -> int:
    """Parse a column key into a 1-based ordinal."""
    if not isinstance(key, str) or not key.isascii() or not key.isdigit():
        raise ConfigFormatError(f"column key {key!r} is not a positive integer ordinal")
    ordinal = int(key)
    if ordinal < 1:
        raise ConfigFormatError(f"column key {key!r} is not a positive integer ordinal")
    return ordinal


def _column_policy(cattrs: object, *, where: str) -> ColumnProtectionPolicy:
    if cattrs is None:
        return ColumnProtectionPolicy()
    _require_object(cattrs, f"'{CATTRS_KEY}' of {where}")

    attributes: dict[str, list[str]] = {}
    for name, values in cattrs.items():
        if not isinstance(values, list):
            raise ConfigFormatError(f"attribute {name!r} of {where} must be an array")
        attributes[name] = [_attribute_value(value, name=name, where=where) for value in values]
    return ColumnProtectionPolicy.from_mapping(attributes)


def _attribute_value(value: object, *, name: str, where: str) -> str:
    """Strings are taken as-is; other JSON scalars become their JSON text."""
    if isinstance(value, str):
        return value
    if value is None or isinstance(value, (bool, int, float)):
        return json.dumps(value)
    raise ConfigFormatError(f"attribute {name!r} of {where} has non-scalar value {value!r}")


def _require_object(value: object, what: str) -> None:
    if not isinstance(value, Mapping):
        raise ConfigFormatError(f"{what} must be a JSON object, got {type(value).__name__}")


class PolicyResolver:
    """One loaded policy document plus a cache of resolved maps keyed by exact SQL."""

    def __init__(self, config: ConfigSource = None) -> None:
        self._config = load_config(config)
        self._cache: dict[str, StatementPolicyMap] = {}
        self._lock = threading.Lock()

    @property
    def config(self) -> Mapping:
        return self._config

    def resolve(self, sql: str) -> StatementPolicyMap:
        cached = self._cache.get(sql)
        if cached is not None:
            return cached
        resolved = resolve(self._config, sql)
        with self._lock:
            return self._cache.setdefault(sql, resolved)

    def statements(self) -> list[str]:
        """SQL texts that have an entry in the document."""
        namespace = self._config.get(STATEMENT_NAMESPACE)
        if not isinstance(namespace, Mapping):
            return []
        return list(namespace)

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()
