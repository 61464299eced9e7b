"""
Target matching and orchestration: from a target string to rendered trees.

Targets:
    ""                      every contract in the project
    Vault                   every public/external function of Vault
    Vault::withdraw         every overload of withdraw
    Vault::withdraw(uint256,address)   a single overload
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from .ast_loader import SolcAstLoader
from .conditions import BranchPoint
from .errors import AstLoadError
from .extractor import BranchExtractor
from .foundry import FoundryProject
from .logging_utils import get_logger
from .renderer import render, write_tree
from .resolver import ContractIndex, parameters, signature
from .tree_builder import TreeBuilder

logger = get_logger(__name__)


@dataclass(frozen=True)
class Target:
    contract_name: Optional[str] = None
    function_name: Optional[str] = None
    signature: Optional[str] = None

    @property
    def is_all(self) -> bool:
        return self.contract_name is None

    @property
    def is_contract(self) -> bool:
        return self.contract_name is not None and self.function_name is None


def parse_target(text: str) -> Target:
    """Parse ``Contract``, ``Contract::fn`` or ``Contract::fn(types)``."""
    text = (text or "").strip()
    if not text:
        return Target()

    if "::" not in text:
        return Target(contract_name=text)

    contract_name, function_part = text.split("::", 1)
    open_paren = function_part.find("(")
    if open_paren != -1 and function_part.endswith(")"):
        return Target(
            contract_name=contract_name,
            function_name=function_part[:open_paren],
            signature=function_part[open_paren + 1:-1].replace(" ", ""),
        )
    return Target(contract_name=contract_name, function_name=function_part)


@dataclass
class FunctionContext:
    """Everything extracted for one function (one overload)."""
    contract_name: str
    function_name: str
    signature: str
    parameters: List[str]
    state_variables: List[str]
    branch_points: List[BranchPoint] = field(default_factory=list)


@dataclass
class GeneratedTree:
    path: Path
    text: str
    functions: List[FunctionContext]

    @property
    def branch_count(self) -> int:
        return sum(len(f.branch_points) for f in self.functions)


def analyze_function(index: ContractIndex, contract_name: str, function: dict) -> FunctionContext:
    """Extract the branch points of one FunctionDefinition."""
    state_vars = index.state_variables(contract_name)
    params = parameters(function)
    extractor = BranchExtractor(state_vars, params, index.guard_resolver(contract_name))
    points = extractor.extract(function)
    logger.debug("%s::%s(%s): %d branch points", contract_name, function.get("name"),
                 signature(function), len(points))

    return FunctionContext(
        contract_name=contract_name,
        function_name=function.get("name", ""),
        signature=signature(function),
        parameters=params,
        state_variables=state_vars,
        branch_points=points,
    )


class TreeGenerator:
    """Renders and writes trees for targets within one contract index."""

    def __init__(self, index: ContractIndex, output_dir: Path,
                 builder: Optional[TreeBuilder] = None):
        self.index = index
        self.output_dir = Path(output_dir)
        self.builder = builder or TreeBuilder()

    def render_function(self, ctx: FunctionContext) -> str:
        return render(self.builder.build(ctx.function_name, ctx.branch_points))

    def _tree(self, contexts: List[FunctionContext], file_stem: str) -> GeneratedTree:
        # Overloads share a file, separated by a blank line
        text = "\n".join(self.render_function(ctx) for ctx in contexts)
        return GeneratedTree(path=self.output_dir / f"{file_stem}.tree", text=text, functions=contexts)

    def generate_function(self, contract_name: str, function_name: str,
                          sig: Optional[str] = None) -> GeneratedTree:
        if sig is not None:
            function = self.index.function_by_signature(contract_name, function_name, sig)
            ctx = analyze_function(self.index, contract_name, function)
            return self._tree([ctx], f"{contract_name}.{function_name}({ctx.signature})")

        contexts = [analyze_function(self.index, contract_name, f)
                    for f in self.index.functions(contract_name, function_name)]
        return self._tree(contexts, f"{contract_name}.{function_name}")

    def generate_contract(self, contract_name: str) -> List[GeneratedTree]:
        grouped: Dict[str, List[FunctionContext]] = {}
        for function in self.index.public_functions(contract_name):
            ctx = analyze_function(self.index, contract_name, function)
            grouped.setdefault(ctx.function_name, []).append(ctx)

        return [self._tree(contexts, f"{contract_name}.{name}") for name, contexts in grouped.items()]

    def generate(self, target: Target, source: Optional[str] = None) -> List[GeneratedTree]:
        """Generate trees for a target; ``source`` limits the all-contracts mode."""
        if target.is_all:
            trees = []
            for contract_name in self.index.contract_names(source):
                trees.extend(self.generate_contract(contract_name))
            return trees
        if target.is_contract:
            return self.generate_contract(target.contract_name)
        return [self.generate_function(target.contract_name, target.function_name, target.signature)]


def write_trees(trees: List[GeneratedTree]) -> List[Path]:
    return [write_tree(tree.text, tree.path) for tree in trees]


def generate_from_units(target: Target, source_units: Mapping[str, dict],
                        output_dir: Path) -> List[GeneratedTree]:
    """Generate trees from already-loaded source units (e.g. AST JSON files)."""
    index = ContractIndex(source_units)
    return TreeGenerator(index, output_dir).generate(target)


def generate_from_project(target: Target, project: FoundryProject, loader: SolcAstLoader,
                          output_dir: Path) -> List[GeneratedTree]:
    """Compile what the target needs and generate its trees."""
    if not target.is_all:
        path = project.find_contract(target.contract_name)
        logger.debug("Found contract %s at %s", target.contract_name, path)
        index = ContractIndex(loader.load(path))
        return TreeGenerator(index, output_dir).generate(target)

    trees = []
    for path in project.find_all_sources():
        try:
            units = loader.load(path)
        except AstLoadError as e:
            logger.warning("Skipping %s: %s", project.relative(path), e)
            continue
        index = ContractIndex(units)
        trees.extend(TreeGenerator(index, output_dir).generate(target, source=project.relative(path)))
    return trees
