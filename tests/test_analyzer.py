"""Unit tests for the function-level analyzer."""

from smartcheck.analyzer import analyze_function, writes_after_call
from smartcheck.extractor import iter_functions
from smartcheck.findings.models import Severity


def _record(*lines: str):
    records = list(iter_functions(list(lines)))
    assert len(records) == 1
    return records[0]


def _ids(findings):
    return [f.rule_id for f in findings]


def test_public_function_without_mutability():
    findings = analyze_function(_record("function test() public {", "// some code", "}"))
    assert _ids(findings) == ["visibility"]
    assert findings[0].severity == Severity.MEDIUM
    assert findings[0].message == "Public function without state mutability specifier"
    assert findings[0].location.line == 1


def test_view_suppresses_mutability_finding():
    findings = analyze_function(_record("function get() public view returns (uint) {", "return x;", "}"))
    assert findings == []


def test_non_public_function_not_checked_for_mutability():
    assert analyze_function(_record("function helper() internal {", "}")) == []


def test_payable_without_value_check():
    findings = analyze_function(_record("function deposit() external payable {", "total += msg.value;", "}"))
    assert _ids(findings) == ["payable-validation"]


def test_payable_with_value_check():
    for check in ("require(msg.value > 0);", "if (msg.value == 0) { revert(); }"):
        record = _record("function deposit() external payable {", check, "}")
        assert analyze_function(record) == []


def test_reentrancy_when_write_follows_call():
    record = _record(
        "function pay(uint amount) internal {",
        'msg.sender.call{value: amount}("");',
        "balances[msg.sender] -= amount;",
        "}",
    )
    assert writes_after_call(record)
    findings = analyze_function(record)
    assert _ids(findings) == ["reentrancy"]
    assert findings[0].severity == Severity.HIGH


def test_no_reentrancy_when_write_precedes_call():
    record = _record(
        "function pay(uint amount) internal {",
        "balances[msg.sender] -= amount;",
        'msg.sender.call{value: amount}("");',
        "}",
    )
    assert not writes_after_call(record)
    assert analyze_function(record) == []


def test_reentrancy_when_call_and_write_share_a_line():
    record = _record(
        "function pay(uint amount) internal {",
        "msg.sender.transfer(amount); balances[msg.sender] -= amount;",
        "}",
    )
    assert writes_after_call(record)


def test_unprotected_privileged_functions():
    assert _ids(analyze_function(_record("function initialize(address o) external {", "}"))) == [
        "unprotected-init"
    ]
    assert _ids(analyze_function(_record("function upgrade(address i) external {", "}"))) == [
        "unprotected-upgrade"
    ]
    assert _ids(analyze_function(_record("function withdraw() external {", "}"))) == [
        "unprotected-withdraw"
    ]


def test_unprotected_selfdestruct_combines_with_name_check():
    record = _record("function withdraw() external {", "selfdestruct(payable(msg.sender));", "}")
    assert _ids(analyze_function(record)) == ["unprotected-withdraw", "unprotected-selfdestruct"]


def test_owner_guard_protects_privileged_functions():
    record = _record("function withdraw() external onlyOwner {", "selfdestruct(payable(msg.sender));", "}")
    assert analyze_function(record) == []


def test_custom_owner_guard():
    record = _record("function upgrade(address i) external onlyAdmin {", "}")
    assert _ids(analyze_function(record)) == ["unprotected-upgrade"]
    guards = frozenset({"onlyOwner", "onlyAdmin"})
    assert analyze_function(record, owner_guards=guards) == []


def test_findings_in_check_order():
    record = _record(
        "function withdraw(uint amount) public payable {",
        "msg.sender.transfer(amount);",
        "balances[msg.sender] -= amount;",
        "}",
    )
    assert _ids(analyze_function(record)) == [
        "visibility",
        "payable-validation",
        "reentrancy",
        "unprotected-withdraw",
    ]
