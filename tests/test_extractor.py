"""Tests for smartcheck.extractor: contract discovery, preamble, function records."""

from smartcheck.context import create_context
from smartcheck.extractor import (
    UNSPECIFIED,
    extract_layout,
    find_contract_line,
    iter_functions,
    parse_function_name,
    parse_modifiers,
    parse_visibility,
    preamble_findings,
)
from smartcheck.findings.models import Severity

VAULT = """
pragma solidity ^0.8.0;

contract Vault {
    mapping(address => uint) public balances;
    address owner;

    function deposit() external payable {
        balances[msg.sender] += msg.value;
    }

    function withdraw(uint amount) public onlyOwner nonReentrant {
        (bool ok, ) = msg.sender.call{value: amount}("");
        require(ok);
    }
}
"""


def test_find_contract_line():
    assert find_contract_line(["pragma solidity ^0.8.0;", "contract A {"]) == 1
    assert find_contract_line(["abstract contract Base {"]) == 0
    assert find_contract_line(["pragma solidity ^0.8.0;", "uint public value;"]) is None


def test_no_contract_gives_no_layout():
    assert extract_layout(["pragma solidity ^0.8.0;", "library L {"]) is None


def test_layout_preamble_and_functions():
    ctx = create_context(VAULT)
    layout = extract_layout(ctx.lines)
    assert layout is not None
    assert ctx.lines[layout.contract_line] == "contract Vault {"
    preamble_text = [text for _, text in layout.preamble]
    assert "mapping(address => uint) public balances;" in preamble_text
    assert "address owner;" in preamble_text
    assert [f.name for f in layout.functions] == ["deposit", "withdraw"]


def test_function_facts():
    ctx = create_context(VAULT)
    deposit, withdraw = extract_layout(ctx.lines).functions

    assert deposit.visibility == "external"
    assert deposit.is_payable
    assert deposit.has_state_change
    assert not deposit.has_external_call

    assert withdraw.visibility == "public"
    assert not withdraw.is_payable
    assert withdraw.has_external_call
    assert not withdraw.has_state_change
    assert withdraw.modifiers == frozenset({"onlyOwner", "nonReentrant"})
    assert withdraw.body_lines[0].startswith("function withdraw")


def test_function_start_line_is_signature_index():
    ctx = create_context(VAULT)
    deposit = extract_layout(ctx.lines).functions[0]
    assert ctx.lines[deposit.start_line] == "function deposit() external payable {"
    # 1 stripped leading blank line + 0-based index + 1
    assert ctx.original_line(deposit.start_line) == 8


def test_last_function_closed_at_end_of_input():
    lines = ["function a() public {", "x += 1;", "function b() private {", "y -= 1;", "}"]
    records = list(iter_functions(lines))
    assert [r.name for r in records] == ["a", "b"]
    assert records[1].body == "function b() private {\ny -= 1;\n}"


def test_lines_before_first_signature_belong_to_no_function():
    records = list(iter_functions(["x.transfer(1);", "function a() internal {", "}"]))
    assert len(records) == 1
    assert not records[0].has_external_call


def test_parse_visibility():
    assert parse_visibility("function a() public view {") == "public"
    assert parse_visibility("function a() internal {") == "internal"
    assert parse_visibility("function publicMint() external {") == "external"
    assert parse_visibility("function a() {") == UNSPECIFIED


def test_parse_function_name():
    assert parse_function_name("function withdraw(uint a) public {") == "withdraw"
    assert parse_function_name("function () external payable {") == ""


def test_parse_modifiers():
    assert parse_modifiers("function a() public onlyOwner {") == frozenset({"onlyOwner"})
    assert parse_modifiers(
        "function setFee(uint f) external onlyRole(ADMIN_ROLE) returns (bool) {"
    ) == frozenset({"onlyRole"})
    assert parse_modifiers("function a(uint x) public view virtual override(A, B) returns (uint) {") == frozenset()
    assert parse_modifiers("function a") == frozenset()


def test_preamble_findings_for_public_mutable_state():
    source = """
        pragma solidity ^0.8.0;
        contract Test {
          uint public value;
          uint public constant CAP = 100;
          address public immutable admin;
          uint private secret;
        }
    """
    ctx = create_context(source)
    findings = preamble_findings(extract_layout(ctx.lines), ctx)
    assert len(findings) == 1
    assert findings[0].rule_id == "state-visibility"
    assert findings[0].severity == Severity.LOW
    assert findings[0].message == "Public state variable without getter"
    assert findings[0].location.line == 4
