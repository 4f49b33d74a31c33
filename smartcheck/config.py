from __future__ import annotations

"""
Analyzer configuration: which rules are enabled, in what order, and the knobs
the function analyzer and deduplication step read.

The rule list order is the catalog order. It decides evaluation order per line
and therefore which finding survives when two of the same rule collide during
deduplication (the first one wins).
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Iterable, List, Optional, Sequence

from smartcheck.rules.base import Rule
from smartcheck.rules.dangerous_calls import DelegatecallRule, SelfdestructRule
from smartcheck.rules.deprecated import SuicideRule, ThrowRule
from smartcheck.rules.gas_limit import GasLimitRule
from smartcheck.rules.hardcoded_address import HardcodedAddressRule
from smartcheck.rules.reentrancy import ReentrancyRule
from smartcheck.rules.timestamp import TimestampDependenceRule
from smartcheck.rules.tx_origin import TxOriginRule
from smartcheck.rules.unchecked_send import UncheckedSendRule

DEFAULT_OWNER_GUARDS: FrozenSet[str] = frozenset({"onlyOwner"})
DEFAULT_DEDUP_WINDOW = 2
DEFAULT_DB_PATH = "smartcheck.db"
DEFAULT_PORT = 3000


def build_catalog() -> List[Rule]:
    """Return a fresh instance of every implemented rule, in catalog order."""
    return [
        ReentrancyRule(),
        TxOriginRule(),
        TimestampDependenceRule(),
        HardcodedAddressRule(),
        UncheckedSendRule(),
        DelegatecallRule(),
        SelfdestructRule(),
        SuicideRule(),
        ThrowRule(),
        GasLimitRule(),
    ]


@dataclass
class Config:
    """
    Analyzer configuration.

    rules: the catalog, in evaluation order.
    disabled_rules: rule ids to skip (catalog rules only; function-level
        checks are always on).
    owner_guards: modifier names that mark a function as owner-only.
    dedup_window: a line-rule finding within this many lines of an existing
        finding with the same rule id is dropped.
    """

    rules: Sequence[Rule] = field(default_factory=build_catalog)
    disabled_rules: FrozenSet[str] = frozenset()
    owner_guards: FrozenSet[str] = DEFAULT_OWNER_GUARDS
    dedup_window: int = DEFAULT_DEDUP_WINDOW


def get_default_config(
    disabled_rules: Optional[Iterable[str]] = None,
    owner_guards: Optional[Iterable[str]] = None,
) -> Config:
    """
    Return the default configuration with all currently implemented rules.

    owner_guards extends (never replaces) the built-in onlyOwner guard.
    """
    guards = DEFAULT_OWNER_GUARDS
    if owner_guards:
        guards = guards | frozenset(owner_guards)
    return Config(
        rules=build_catalog(),
        disabled_rules=frozenset(disabled_rules or ()),
        owner_guards=guards,
    )


def get_enabled_rules(config: Config | None = None) -> Sequence[Rule]:
    """Return the catalog rules of config (or the default config) minus disabled ids."""
    if config is None:
        config = get_default_config()
    return [r for r in config.rules if r.id not in config.disabled_rules]


def get_rule(rule_id: str, config: Config | None = None) -> Optional[Rule]:
    """Look up a catalog rule by id."""
    if config is None:
        config = get_default_config()
    for rule in config.rules:
        if rule.id == rule_id:
            return rule
    return None


def get_db_path() -> Path:
    """History database location, from SMARTCHECK_DB or the default."""
    return Path(os.environ.get("SMARTCHECK_DB", DEFAULT_DB_PATH))


def get_port() -> int:
    return int(os.environ.get("PORT", DEFAULT_PORT))
