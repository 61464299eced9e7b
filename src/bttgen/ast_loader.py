"""
Solidity source to AST loading.

Sources are compiled with solc through py-solc-x, asking only for the
compact JSON AST. The import closure is gathered here and handed to solc
as in-memory content keyed by source unit name, so solc never reads the
file system itself. Pre-built ASTs (solc output or Foundry artifacts) can
be loaded with load_ast_json().
"""

import json
import posixpath
import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import solcx
from solcx.exceptions import SolcError, SolcNotInstalled

from .errors import AstLoadError
from .foundry import FoundryProject
from .logging_utils import get_logger

logger = get_logger(__name__)

IMPORT_PATTERN = re.compile(r'^\s*import\s+(?:[^;]*?\s+from\s+)?["\']([^"\']+)["\']', re.MULTILINE)


def find_imports(source: str) -> List[str]:
    """Import paths named by a Solidity source, in order."""
    return IMPORT_PATTERN.findall(source)


class SolcAstLoader:
    """Compile project sources into compact JSON ASTs."""

    def __init__(self, project: FoundryProject, solc_version: Optional[str] = None,
                 auto_install: bool = False):
        self.project = project
        self.solc_version = solc_version or project.solc_version
        self.auto_install = auto_install
        self._cache: Dict[Path, Dict[str, dict]] = {}

    def unit_name(self, import_path: str, from_unit: str) -> str:
        """Source unit name solc gives an import seen from from_unit."""
        for prefix, target in self.project.remappings:
            if import_path.startswith(prefix):
                return posixpath.normpath(import_path.replace(prefix, target, 1))
        if import_path.startswith(("./", "../")):
            return posixpath.normpath(posixpath.join(posixpath.dirname(from_unit), import_path))
        return import_path

    def collect_sources(self, files: Iterable[Path]) -> Dict[str, dict]:
        """Gather files and their transitive imports as standard-JSON sources."""
        sources: Dict[str, dict] = {}
        pending = [(self.project.relative(f), Path(f).resolve()) for f in files]

        while pending:
            unit, path = pending.pop()
            if unit in sources:
                continue
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise AstLoadError(f"Cannot read {path}: {e}") from e
            sources[unit] = {"content": content}

            for import_path in find_imports(content):
                resolved = self.project.resolve_import(import_path, path)
                if resolved is None:
                    logger.warning("Unresolved import %s in %s", import_path, unit)
                    continue
                pending.append((self.unit_name(import_path, unit), resolved.resolve()))

        return sources

    def _ensure_compiler(self):
        if not self.solc_version:
            return
        installed = {str(v) for v in solcx.get_installed_solc_versions()}
        if self.solc_version in installed:
            return
        if not self.auto_install:
            raise AstLoadError(
                f"solc {self.solc_version} is not installed (use --install-solc to fetch it)"
            )
        logger.info("Installing solc %s", self.solc_version)
        solcx.install_solc(self.solc_version)

    def compile(self, files: Iterable[Path]) -> Dict[str, dict]:
        """Compile files and return {source unit name: SourceUnit AST}."""
        sources = self.collect_sources(files)
        input_data = {
            "language": "Solidity",
            "sources": sources,
            "settings": {
                "remappings": [f"{prefix}={target}" for prefix, target in self.project.remappings],
                "outputSelection": {"*": {"": ["ast"]}},
            },
        }

        self._ensure_compiler()
        try:
            output = solcx.compile_standard(
                input_data,
                solc_version=self.solc_version,
                base_path=str(self.project.root),
                allow_paths=[str(self.project.root), *(str(d) for d in self.project.lib_dirs)],
            )
        except SolcNotInstalled as e:
            raise AstLoadError(f"No solc compiler available: {e}") from e
        except SolcError as e:
            raise AstLoadError(f"solc failed: {e}") from e

        units = source_units_from_output(output)
        logger.debug("Compiled %d source units", len(units))
        return units

    def load(self, file_path: Path) -> Dict[str, dict]:
        """Compile one file (memoized) and return every source unit it pulls in."""
        file_path = Path(file_path).resolve()
        if file_path not in self._cache:
            self._cache[file_path] = self.compile([file_path])
        return self._cache[file_path]


def source_units_from_output(output: dict) -> Dict[str, dict]:
    """Pull the SourceUnit ASTs out of solc standard-JSON output."""
    units = {}
    for name, source in (output.get("sources") or {}).items():
        ast = source.get("ast")
        if ast is not None:
            units[name] = ast
    return units


def load_ast_json(path: Path) -> Dict[str, dict]:
    """
    Load ASTs from a JSON file.

    Accepts a bare SourceUnit, a Foundry build artifact (``ast`` key) or a
    solc standard-JSON output (``sources`` map).
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise AstLoadError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise AstLoadError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise AstLoadError(f"{path} does not contain a Solidity AST")

    if data.get("nodeType") == "SourceUnit":
        return {data.get("absolutePath") or path.name: data}

    ast = data.get("ast")
    if isinstance(ast, dict) and ast.get("nodeType") == "SourceUnit":
        return {ast.get("absolutePath") or path.name: ast}

    if isinstance(data.get("sources"), dict):
        units = source_units_from_output(data)
        if units:
            return units

    raise AstLoadError(f"{path} does not contain a Solidity AST")
