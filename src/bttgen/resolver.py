"""
Contract index and inheritance resolution over solc ASTs.

Builds an inheritance graph (child -> base) of every contract found in a
set of source units, then answers the questions the extractor needs:
which modifier body a name resolves to, which names are state variables,
which functions match a name or signature.
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

import networkx as nx

from .errors import ContractNotFoundError, FunctionNotFoundError
from .expressions import node_type, type_name_to_string
from .logging_utils import get_logger

logger = get_logger(__name__)

PUBLIC_VISIBILITIES = {"public", "external"}


@dataclass
class ContractEntry:
    """A contract definition and the source unit it was found in."""
    name: str
    source: str
    node: dict

    @property
    def kind(self) -> str:
        return self.node.get("contractKind", "contract")

    @property
    def base_names(self) -> List[str]:
        names = []
        for base in self.node.get("baseContracts") or []:
            base_name = base.get("baseName") or {}
            name = base_name.get("name") or (base_name.get("pathNode") or {}).get("name")
            if name:
                names.append(name.split(".")[-1])
        return names

    def members(self, member_type: str) -> List[dict]:
        return [n for n in self.node.get("nodes") or [] if node_type(n) == member_type]


def signature(function: dict) -> str:
    """Parameter type signature of a function, e.g. ``address,uint256``."""
    params = (function.get("parameters") or {}).get("parameters") or []
    return ",".join(type_name_to_string(p.get("typeName")) for p in params)


def parameters(function: dict) -> List[str]:
    """Names of the function's named parameters."""
    params = (function.get("parameters") or {}).get("parameters") or []
    return [p["name"] for p in params if p.get("name")]


class ContractIndex:
    """Index of contracts across source units with inheritance resolution."""

    def __init__(self, source_units: Mapping[str, dict]):
        self.source_units = dict(source_units)
        self.contracts: Dict[str, ContractEntry] = {}
        self.graph = nx.DiGraph()

        for source, unit in self.source_units.items():
            for node in unit.get("nodes") or []:
                if node_type(node) != "ContractDefinition":
                    continue
                entry = ContractEntry(name=node["name"], source=source, node=node)
                if entry.name in self.contracts:
                    logger.debug("Contract %s defined twice, keeping %s",
                                 entry.name, self.contracts[entry.name].source)
                    continue
                self.contracts[entry.name] = entry

        for entry in self.contracts.values():
            self.graph.add_node(entry.name)
            for base in entry.base_names:
                self.graph.add_edge(entry.name, base)

    def contract(self, name: str) -> ContractEntry:
        try:
            return self.contracts[name]
        except KeyError:
            raise ContractNotFoundError(name) from None

    def contract_names(self, source: Optional[str] = None) -> List[str]:
        """Names of non-interface contracts, optionally limited to one source unit."""
        return [
            entry.name for entry in self.contracts.values()
            if entry.kind != "interface" and (source is None or entry.source == source)
        ]

    def inheritance_chain(self, name: str) -> List[str]:
        """Ancestors first, the contract itself last."""
        self.contract(name)
        chain = []
        visited = set()

        def visit(current):
            if current in visited:
                return
            visited.add(current)
            # Successors keep base declaration order
            for base in self.graph.successors(current):
                visit(base)
            if current in self.contracts:
                chain.append(current)

        visit(name)
        return chain

    def state_variables(self, name: str) -> List[str]:
        """State variable names across the inheritance chain."""
        names = []
        for contract_name in self.inheritance_chain(name):
            for var in self.contracts[contract_name].members("VariableDeclaration"):
                if var.get("name") and var["name"] not in names:
                    names.append(var["name"])
        return names

    def modifier_body(self, contract_name: str, modifier_name: str) -> Optional[dict]:
        """Body of the most-derived modifier with that name, if any."""
        for name in reversed(self.inheritance_chain(contract_name)):
            for modifier in self.contracts[name].members("ModifierDefinition"):
                if modifier.get("name") == modifier_name:
                    return modifier.get("body")
        return None

    def guard_resolver(self, contract_name: str):
        """Bind modifier lookup to one contract for the extractor."""
        def resolve_guard_body(modifier_name: str) -> Optional[dict]:
            return self.modifier_body(contract_name, modifier_name)
        return resolve_guard_body

    def functions(self, contract_name: str, function_name: str) -> List[dict]:
        """All overloads of a function declared in the contract."""
        entry = self.contract(contract_name)
        found = [f for f in entry.members("FunctionDefinition") if f.get("name") == function_name]
        if not found:
            raise FunctionNotFoundError(function_name, contract_name)
        return found

    def function_by_signature(self, contract_name: str, function_name: str,
                              sig: str) -> dict:
        wanted = sig.replace(" ", "")
        for function in self.functions(contract_name, function_name):
            if signature(function) == wanted:
                return function
        raise FunctionNotFoundError(f"{function_name}({sig})", contract_name)

    def public_functions(self, contract_name: str) -> List[dict]:
        """Implemented public/external functions declared in the contract."""
        return [
            f for f in self.contract(contract_name).members("FunctionDefinition")
            if f.get("kind", "function") == "function"
            and f.get("name")
            and f.get("visibility") in PUBLIC_VISIBILITIES
            and f.get("body") is not None
        ]
