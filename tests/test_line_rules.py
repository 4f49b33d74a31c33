"""Unit tests for the single-line rule catalog."""

import pytest

from smartcheck.findings.models import Severity
from smartcheck.rules.dangerous_calls import DelegatecallRule, SelfdestructRule
from smartcheck.rules.deprecated import SuicideRule, ThrowRule
from smartcheck.rules.gas_limit import GasLimitRule
from smartcheck.rules.reentrancy import ReentrancyRule
from smartcheck.rules.timestamp import TimestampDependenceRule
from smartcheck.rules.tx_origin import TxOriginRule
from smartcheck.rules.unchecked_send import UncheckedSendRule


def test_reentrancy_call_and_write_on_one_line():
    line = 'msg.sender.call{value: amount}(""); balances[msg.sender] -= amount;'
    finding = ReentrancyRule().check(line, 7)
    assert finding is not None
    assert finding.rule_id == "reentrancy"
    assert finding.severity == Severity.HIGH
    assert finding.location.line == 7
    assert finding.location.column == 1


def test_reentrancy_needs_both_patterns():
    rule = ReentrancyRule()
    assert rule.check('msg.sender.call{value: amount}("");', 1) is None
    assert rule.check("balances[msg.sender] -= amount;", 1) is None


def test_tx_origin_detected():
    finding = TxOriginRule().check("require(tx.origin == owner);", 3)
    assert finding is not None
    assert finding.rule_id == "tx-origin"
    assert finding.severity == Severity.HIGH
    assert finding.message == "Use of tx.origin detected"


def test_msg_sender_not_flagged_as_tx_origin():
    assert TxOriginRule().check("return msg.sender == owner;", 1) is None


def test_timestamp_dependence():
    rule = TimestampDependenceRule()
    finding = rule.check("return block.timestamp;", 2)
    assert finding is not None
    assert finding.severity == Severity.MEDIUM
    assert rule.check("return block.number;", 2) is None


@pytest.mark.parametrize(
    "line",
    [
        "payable(msg.sender).transfer(amount);",
        "msg.sender.send(amount);",
    ],
)
def test_unchecked_send_flagged(line):
    finding = UncheckedSendRule().check(line, 1)
    assert finding is not None
    assert finding.rule_id == "unchecked-send"


@pytest.mark.parametrize(
    "line",
    [
        "require(msg.sender.send(amount));",
        "if (!msg.sender.send(amount)) revert();",
        "assert(msg.sender.send(amount));",
        "uint total = a + b;",
    ],
)
def test_unchecked_send_not_flagged(line):
    assert UncheckedSendRule().check(line, 1) is None


def test_delegatecall_detected():
    finding = DelegatecallRule().check("impl.delegatecall(data);", 4)
    assert finding is not None
    assert finding.rule_id == "delegatecall-usage"
    assert finding.severity == Severity.HIGH


def test_selfdestruct_detected():
    finding = SelfdestructRule().check("selfdestruct(payable(owner));", 9)
    assert finding is not None
    assert finding.rule_id == "selfdestruct-usage"


def test_suicide_detected():
    finding = SuicideRule().check("suicide(owner);", 1)
    assert finding is not None
    assert finding.rule_id == "suicide-usage"
    assert finding.severity == Severity.HIGH


def test_throw_detected():
    rule = ThrowRule()
    finding = rule.check("if (msg.value == 0) throw;", 1)
    assert finding is not None
    assert finding.rule_id == "throw-usage"
    assert finding.severity == Severity.MEDIUM
    assert rule.check("revert();", 1) is None


def test_gas_limit_unbounded_loop():
    rule = GasLimitRule()
    finding = rule.check("for (uint i = 0; i < users.length; i++) {", 5)
    assert finding is not None
    assert finding.rule_id == "gas-limit"
    assert rule.check("while (true) {", 5) is not None


def test_gas_limit_guarded_loop_not_flagged():
    assert GasLimitRule().check("for (uint i = 0; i < n; i++) { require(i < 10);", 1) is None


def test_findings_carry_rule_prose_and_snippet():
    finding = TxOriginRule().check("  require(tx.origin == owner);  ", 1)
    assert finding.description
    assert finding.recommendation == "Use msg.sender instead of tx.origin for authentication."
    assert finding.location.snippet == "require(tx.origin == owner);"
