# Shared textual patterns used by both the rule catalog and the function extractor.

from __future__ import annotations

# Low-level calls that hand control (and ether) to another contract
EXTERNAL_CALL_PATTERNS = (".call{", ".send(", ".transfer(")

# Value transfers whose return value / failure must be checked
SEND_PATTERNS = (".send(", ".transfer(")

# Writes to contract storage (heuristic)
STATE_CHANGE_PATTERNS = ("balances[", "+=", "-=")

# Anything that looks like a guard on the same line
GUARD_PATTERNS = ("require(", "if (", "assert(")

# Unbounded loop headers
LOOP_PATTERNS = ("for (", "while (")

# Prefixes of a body line that validate msg.value
VALUE_CHECK_PREFIXES = ("require(msg.value", "if (msg.value")


def has_external_call(line: str) -> bool:
    return any(p in line for p in EXTERNAL_CALL_PATTERNS)


def has_state_change(line: str) -> bool:
    return any(p in line for p in STATE_CHANGE_PATTERNS)


def has_guard(line: str) -> bool:
    return any(p in line for p in GUARD_PATTERNS)
