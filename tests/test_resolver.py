"""Tests for the contract index and inheritance resolution."""

import pytest

from bttgen.errors import ContractNotFoundError, FunctionNotFoundError
from bttgen.resolver import ContractIndex, parameters, signature

from sol_ast import (
    array_of,
    binop,
    contract,
    function,
    ident,
    member,
    modifier,
    param,
    require,
    source_unit,
    state_var,
    user_type,
)


def _index():
    ownable = contract(
        "Ownable",
        state_var("owner", "address"),
        modifier("onlyOwner", require(binop(member("msg", "sender"), "==", "owner"))),
    )
    pausable = contract(
        "Pausable",
        state_var("paused", "bool"),
        modifier("whenNotPaused", require(ident("notPaused"))),
    )
    vault = contract(
        "Vault",
        state_var("balances", "mapping"),
        modifier("whenNotPaused", require(ident("vaultOpen"))),
        function("deposit", params=[param("amount")], modifiers=["whenNotPaused"]),
        function("withdraw", params=[param("amount")]),
        function("withdraw", params=[param("amount"), param("to", "address")]),
        function("sweep", params=[param("tokens", array_of(user_type("IERC20")))]),
        function("_internal", visibility="internal"),
        function("abstractOne", implemented=False),
        function("", kind="receive", visibility="external"),
        bases=["Ownable", "Pausable"],
    )
    iface = contract("IVault", function("deposit", implemented=False), kind="interface")
    units = {
        "src/Ownable.sol": source_unit(ownable, path="src/Ownable.sol"),
        "src/Vault.sol": source_unit(pausable, vault, iface, path="src/Vault.sol"),
    }
    return ContractIndex(units)


def test_inheritance_chain_ancestors_first():
    index = _index()
    assert index.inheritance_chain("Vault") == ["Ownable", "Pausable", "Vault"]
    assert index.inheritance_chain("Ownable") == ["Ownable"]


def test_unknown_bases_are_ignored():
    index = ContractIndex({"a.sol": source_unit(contract("A", bases=["Missing"]))})
    assert index.inheritance_chain("A") == ["A"]


def test_cyclic_inheritance_terminates():
    units = {"a.sol": source_unit(contract("A", bases=["B"]), contract("B", bases=["A"]))}
    assert ContractIndex(units).inheritance_chain("A") == ["B", "A"]


def test_state_variables_across_chain():
    assert _index().state_variables("Vault") == ["owner", "paused", "balances"]


def test_modifier_resolution_prefers_most_derived():
    index = _index()
    body = index.modifier_body("Vault", "whenNotPaused")
    assert body["statements"][0]["expression"]["arguments"][0]["name"] == "vaultOpen"
    assert index.modifier_body("Vault", "onlyOwner") is not None
    assert index.modifier_body("Ownable", "whenNotPaused") is None
    assert index.guard_resolver("Vault")("missing") is None


def test_functions_and_signatures():
    index = _index()
    overloads = index.functions("Vault", "withdraw")
    assert [signature(f) for f in overloads] == ["uint256", "uint256,address"]
    assert parameters(overloads[1]) == ["amount", "to"]
    assert signature(index.functions("Vault", "sweep")[0]) == "IERC20[]"
    assert index.function_by_signature("Vault", "withdraw", "uint256, address") is overloads[1]


def test_missing_lookups_raise():
    index = _index()
    with pytest.raises(ContractNotFoundError):
        index.contract("Nope")
    with pytest.raises(FunctionNotFoundError):
        index.functions("Vault", "nope")
    with pytest.raises(FunctionNotFoundError):
        index.function_by_signature("Vault", "withdraw", "bytes32")


def test_public_functions():
    names = [f["name"] for f in _index().public_functions("Vault")]
    assert names == ["deposit", "withdraw", "withdraw", "sweep"]


def test_contract_names_skip_interfaces():
    index = _index()
    assert index.contract_names() == ["Ownable", "Pausable", "Vault"]
    assert index.contract_names("src/Vault.sol") == ["Pausable", "Vault"]
