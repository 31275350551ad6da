"""Protection policy: document loading, exact-SQL resolution, static checks."""

from dbveil.policy._types import ColumnProtectionPolicy, StatementPolicyMap
from dbveil.policy.check import check_config
from dbveil.policy.placeholders import count_placeholders
from dbveil.policy.resolve import PolicyResolver, load_config, resolve

__all__ = [
    "ColumnProtectionPolicy",
    "PolicyResolver",
    "StatementPolicyMap",
    "check_config",
    "count_placeholders",
    "load_config",
    "resolve",
]
