"""Foundry project discovery and configuration."""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from .errors import ConfigError, ContractNotFoundError, ProjectNotFoundError
from .logging_utils import get_logger

logger = get_logger(__name__)

CONFIG_FILE = "foundry.toml"
REMAPPINGS_FILE = "remappings.txt"


def parse_remapping(line: str) -> Optional[Tuple[str, str]]:
    """Parse ``prefix=target`` (an optional ``context:`` is dropped)."""
    line = line.strip()
    if not line or line.startswith("#") or "=" not in line:
        return None
    prefix, target = line.split("=", 1)
    if ":" in prefix:
        prefix = prefix.split(":", 1)[1]
    return prefix, target


@dataclass
class FoundryProject:
    """A Foundry project rooted at the directory holding foundry.toml."""
    root: Path
    src_dir: Path
    lib_dirs: List[Path] = field(default_factory=list)
    remappings: List[Tuple[str, str]] = field(default_factory=list)
    solc_version: Optional[str] = None

    @classmethod
    def discover(cls, start: Optional[Path] = None) -> "FoundryProject":
        """Find foundry.toml in start (default: cwd) or a parent and load it."""
        start = Path(start or Path.cwd()).resolve()
        root = cls.find_project_root(start)
        return cls.load(root)

    @staticmethod
    def find_project_root(start: Path) -> Path:
        for candidate in [start, *start.parents]:
            if (candidate / CONFIG_FILE).is_file():
                return candidate
        raise ProjectNotFoundError(start)

    @classmethod
    def load(cls, root: Path) -> "FoundryProject":
        """Load the default profile of root/foundry.toml."""
        root = Path(root)
        config_path = root / CONFIG_FILE
        try:
            with open(config_path, "rb") as f:
                config = tomllib.load(f)
        except OSError as e:
            raise ConfigError(f"Failed to read {config_path}: {e}") from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Failed to parse {config_path}: {e}") from e

        profile = config.get("profile", {}).get("default", {})

        src_dir = root / profile.get("src", "src")
        libs = profile.get("libs", profile.get("lib", ["lib"]))
        if isinstance(libs, str):
            libs = [libs]
        lib_dirs = [root / lib for lib in libs]

        remappings = [r for r in (parse_remapping(line) for line in profile.get("remappings", [])) if r]
        remappings_file = root / REMAPPINGS_FILE
        if remappings_file.is_file():
            for line in remappings_file.read_text(encoding="utf-8").splitlines():
                remapping = parse_remapping(line)
                if remapping and remapping not in remappings:
                    remappings.append(remapping)

        solc_version = profile.get("solc_version") or profile.get("solc")
        # `solc` may also be a path to a binary; only keep bare versions
        if solc_version and not str(solc_version)[0].isdigit():
            solc_version = None

        logger.debug("Loaded Foundry project at %s (src=%s, %d remappings)",
                     root, src_dir, len(remappings))
        return cls(root=root, src_dir=src_dir, lib_dirs=lib_dirs,
                   remappings=remappings, solc_version=solc_version)

    def find_all_sources(self) -> List[Path]:
        """Find all Solidity files in the src directory."""
        if not self.src_dir.is_dir():
            return []
        return sorted(p for p in self.src_dir.rglob("*.sol") if p.is_file())

    def find_contract(self, contract_name: str) -> Path:
        """Find the file defining a contract, by file name then by contents."""
        sources = self.find_all_sources()
        expected = f"{contract_name}.sol"

        for path in sources:
            if path.name == expected:
                return path

        patterns = [f"{kind} {contract_name}" for kind in ("contract", "library", "abstract contract")]
        for path in sources:
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError):
                continue
            for pattern in patterns:
                if f"{pattern} " in content or f"{pattern}{{" in content:
                    return path

        raise ContractNotFoundError(contract_name)

    def resolve_import(self, import_path: str, from_file: Path) -> Optional[Path]:
        """Resolve an import path using remappings, relative paths, then libs."""
        for prefix, target in self.remappings:
            if import_path.startswith(prefix):
                path = self.root / import_path.replace(prefix, target, 1)
                if path.exists():
                    return path

        if import_path.startswith(("./", "../")):
            path = (Path(from_file).parent / import_path).resolve()
            if path.exists():
                return path

        for lib_dir in self.lib_dirs:
            path = lib_dir / import_path
            if path.exists():
                return path

        return None

    def relative(self, path: Path) -> str:
        """Source unit name for a file (path relative to the project root)."""
        path = Path(path).resolve()
        try:
            return path.relative_to(self.root.resolve()).as_posix()
        except ValueError:
            return path.as_posix()
