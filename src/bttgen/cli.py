"""Command-line interface for bttgen."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape

from .analyzer import generate_from_project, generate_from_units, parse_target, write_trees
from .ast_loader import SolcAstLoader, load_ast_json
from .config import load_settings
from .errors import BttgenError
from .foundry import FoundryProject
from .logging_utils import console, setup_logging

app = typer.Typer(
    name="bttgen",
    help="Branching Tree Technique (BTT) trees for Solidity functions",
)


@app.command()
def generate(
    target: str = typer.Argument(
        "",
        help="Contract, Contract::function or Contract::function(types); empty for every contract",
    ),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Output directory for .tree files (default: test/trees)",
    ),
    ast_files: Optional[List[Path]] = typer.Option(
        None,
        "--ast",
        help="Read ASTs from solc / Foundry artifact JSON instead of compiling",
        exists=True,
        dir_okay=False,
    ),
    solc_version: Optional[str] = typer.Option(
        None,
        "--solc-version",
        help="solc version to compile with (default: foundry.toml or active solc)",
    ),
    install_solc: bool = typer.Option(
        False,
        "--install-solc",
        help="Download the requested solc version if it is missing",
    ),
    stdout: bool = typer.Option(
        False,
        "--stdout",
        help="Print the trees instead of writing files",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Generate BTT trees for Solidity functions."""
    settings = load_settings()
    setup_logging(verbose or settings.verbose)
    output_dir = output_dir or Path(settings.output_dir)
    parsed = parse_target(target)

    try:
        if ast_files:
            units = {}
            for path in ast_files:
                units.update(load_ast_json(path))
            trees = generate_from_units(parsed, units, output_dir)
        else:
            project = FoundryProject.discover()
            console.print(f"[bold green]Foundry project:[/bold green] {project.root}")
            loader = SolcAstLoader(
                project,
                solc_version=solc_version or settings.solc_version,
                auto_install=install_solc or settings.auto_install_solc,
            )
            trees = generate_from_project(parsed, project, loader, output_dir)
    except BttgenError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1)

    if not trees:
        console.print("[yellow]No public or external functions found[/yellow]")
        return

    if stdout:
        # Same separation as overloads within one file
        typer.echo("\n".join(tree.text for tree in trees), nl=False)
        return

    for tree, path in zip(trees, write_trees(trees)):
        console.print(f"  -> {path} [dim]({tree.branch_count} branch points)[/dim]")
    console.print(f"[bold blue]Generated {len(trees)} tree file(s)[/bold blue]")


@app.command()
def version():
    """Show version information."""
    from . import __version__
    console.print("[bold]bttgen - BTT tree generator for Solidity[/bold]")
    console.print(f"Version: {__version__}")


if __name__ == "__main__":
    app()
