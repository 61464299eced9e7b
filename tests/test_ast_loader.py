"""Tests for AST loading."""

import json

import pytest
import solcx

from bttgen.ast_loader import SolcAstLoader, find_imports, load_ast_json, source_units_from_output
from bttgen.errors import AstLoadError
from bttgen.foundry import FoundryProject

from sol_ast import contract, source_unit


def _write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def project(tmp_path):
    (tmp_path / "foundry.toml").write_text(
        '[profile.default]\nremappings = ["@lib/=lib/shared/"]\n', encoding="utf-8")
    src = tmp_path / "src"
    (src / "utils").mkdir(parents=True)
    shared = tmp_path / "lib" / "shared"
    shared.mkdir(parents=True)

    (src / "Vault.sol").write_text(
        "// SPDX-License-Identifier: MIT\n"
        "pragma solidity ^0.8.20;\n"
        'import "./utils/Math.sol";\n'
        'import {Owned} from "@lib/Owned.sol";\n'
        'import "./Missing.sol";\n'
        "contract Vault is Owned {\n"
        "    function deposit(uint256 amount) external onlyOwner {\n"
        "        require(amount > MathLib.MIN, \"small\");\n"
        "    }\n"
        "}\n",
        encoding="utf-8",
    )
    (src / "utils" / "Math.sol").write_text(
        "pragma solidity ^0.8.20;\nlibrary MathLib { uint256 internal constant MIN = 1; }\n",
        encoding="utf-8",
    )
    (shared / "Owned.sol").write_text(
        "pragma solidity ^0.8.20;\n"
        "abstract contract Owned {\n"
        "    address public owner = msg.sender;\n"
        "    modifier onlyOwner() { require(msg.sender == owner); _; }\n"
        "}\n",
        encoding="utf-8",
    )
    return FoundryProject.load(tmp_path)


def test_find_imports():
    source = (
        'import "./A.sol";\n'
        "import {B, C as D} from '../B.sol';\n"
        'import * as E from "@oz/E.sol";\n'
        '    import "F.sol" as F;\n'
        '// import "G.sol";\n'
    )
    assert find_imports(source) == ["./A.sol", "../B.sol", "@oz/E.sol", "F.sol"]


def test_unit_name(project):
    loader = SolcAstLoader(project)
    assert loader.unit_name("./utils/Math.sol", "src/Vault.sol") == "src/utils/Math.sol"
    assert loader.unit_name("../Vault.sol", "src/utils/Math.sol") == "src/Vault.sol"
    assert loader.unit_name("@lib/Owned.sol", "src/Vault.sol") == "lib/shared/Owned.sol"
    assert loader.unit_name("forge-std/Test.sol", "src/Vault.sol") == "forge-std/Test.sol"


def test_collect_sources_follows_imports(project, caplog):
    loader = SolcAstLoader(project)
    sources = loader.collect_sources([project.src_dir / "Vault.sol"])

    assert sorted(sources) == ["lib/shared/Owned.sol", "src/Vault.sol", "src/utils/Math.sol"]
    assert "library MathLib" in sources["src/utils/Math.sol"]["content"]
    assert "Unresolved import ./Missing.sol" in caplog.text


def test_missing_compiler_version(project):
    loader = SolcAstLoader(project, solc_version="0.0.1")
    with pytest.raises(AstLoadError, match="not installed"):
        loader.compile([project.src_dir / "Vault.sol"])


def test_source_units_from_output():
    unit = source_unit(contract("A"), path="src/A.sol")
    output = {"sources": {"src/A.sol": {"id": 0, "ast": unit}, "src/B.sol": {"id": 1}}}
    assert source_units_from_output(output) == {"src/A.sol": unit}


def test_load_bare_source_unit(tmp_path):
    unit = source_unit(contract("A"), path="src/A.sol")
    assert load_ast_json(_write_json(tmp_path / "A.json", unit)) == {"src/A.sol": unit}


def test_load_foundry_artifact(tmp_path):
    unit = source_unit(contract("A"), path="src/A.sol")
    artifact = {"abi": [], "bytecode": {"object": "0x"}, "ast": unit}
    assert load_ast_json(_write_json(tmp_path / "A.json", artifact)) == {"src/A.sol": unit}


def test_load_standard_output(tmp_path):
    first = source_unit(contract("A"), path="src/A.sol")
    second = source_unit(contract("B"), path="src/B.sol")
    output = {"sources": {"src/A.sol": {"ast": first}, "src/B.sol": {"ast": second}}}
    assert load_ast_json(_write_json(tmp_path / "out.json", output)) == {
        "src/A.sol": first,
        "src/B.sol": second,
    }


@pytest.mark.parametrize("content", ["{broken", "[]", '{"abi": []}', '{"sources": {}}'])
def test_load_rejects_non_ast(tmp_path, content):
    path = tmp_path / "bad.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(AstLoadError):
        load_ast_json(path)


def test_load_missing_file(tmp_path):
    with pytest.raises(AstLoadError):
        load_ast_json(tmp_path / "missing.json")


def _installed_solc():
    try:
        return solcx.get_installed_solc_versions()
    except Exception:
        return []


@pytest.mark.skipif(not _installed_solc(), reason="no solc installed through py-solc-x")
def test_compile_project(project):
    (project.src_dir / "Vault.sol").write_text(
        (project.src_dir / "Vault.sol").read_text(encoding="utf-8").replace('import "./Missing.sol";\n', ""),
        encoding="utf-8",
    )
    version = str(max(_installed_solc()))
    loader = SolcAstLoader(project, solc_version=version)
    units = loader.load(project.src_dir / "Vault.sol")

    assert set(units) == {"src/Vault.sol", "src/utils/Math.sol", "lib/shared/Owned.sol"}
    assert units["src/Vault.sol"]["nodeType"] == "SourceUnit"
    assert loader.load(project.src_dir / "Vault.sol") is units


def test_load_rejects_undecodable_file(tmp_path):
    path = tmp_path / "bad.json"
    path.write_bytes(b'{"x": "\xff\xfe"}')
    with pytest.raises(AstLoadError):
        load_ast_json(path)


def test_collect_sources_rejects_undecodable_file(project):
    (project.src_dir / "Latin1.sol").write_bytes(b"// caf\xe9\ncontract Latin1 {}\n")
    with pytest.raises(AstLoadError, match="Cannot read"):
        SolcAstLoader(project).collect_sources([project.src_dir / "Latin1.sol"])
