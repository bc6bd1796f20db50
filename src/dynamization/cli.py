import json
from typing import List, Optional

import typer

from .bench import random_workload, run_benchmark
from .config import Settings
from .container import Dynamic
from .errors import DynamizationError
from .logging import get_logger
from .structures import SortedVec

app = typer.Typer(help="dynamization – make static structures insertable", no_args_is_help=True)

DEFAULT_STRATEGIES = ["binary", "skew-binary"]


@app.command()
def layout(
    count: int = typer.Argument(..., min=0, help="Number of elements to insert"),
    strategy: str = typer.Option("binary", "--strategy", "-s", help="Strategy: 'binary' or 'skew-binary'"),
) -> None:
    """
    Insert 0..COUNT-1 and print the resulting block layout.
    """
    logger = get_logger(__name__)

    try:
        settings = Settings(strategy=strategy)
    except ValueError as exc:
        logger.error(f"Invalid settings: {exc}")
        raise typer.Exit(code=2) from exc

    dynamic: Dynamic = Dynamic(SortedVec(), settings=settings)
    try:
        dynamic.extend(range(count))
    except DynamizationError as exc:
        logger.error(f"Insertion failed: {exc}")
        raise typer.Exit(code=1) from exc

    typer.echo(f"Strategy: {dynamic.strategy.name}")
    typer.echo(f"Elements: {dynamic.n}")
    typer.echo(f"Digits (lowest level first): {list(dynamic.digits)}")
    typer.echo(f"Blocks: {len(dynamic.blocks())}")
    for block in dynamic.blocks():
        typer.echo(f"  level {block.level}: {block.size} elements")


@app.command()
def bench(
    count: int = typer.Argument(..., min=1, help="Number of random elements to push"),
    strategies: Optional[List[str]] = typer.Option(
        None, "--strategy", "-s", help="Strategy to benchmark (repeatable)"
    ),
    seed: int = typer.Option(42, help="Random seed for the workload"),
    drain: bool = typer.Option(True, "--drain/--no-drain", help="Pop every element after filling"),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON"),
) -> None:
    """
    Compare strategies on a priority-queue workload.

    Pushes COUNT random integers into a dynamized sorted vector under each
    strategy, optionally pops them all, and reports merge counts, elements
    rebuilt and wall time.
    """
    logger = get_logger(__name__)
    names = strategies or DEFAULT_STRATEGIES
    values = random_workload(count, seed=seed)

    results = []
    for name in names:
        logger.info(f"Benchmarking {name} with {count} elements")
        try:
            results.append(run_benchmark(name, values, drain=drain))
        except ValueError as exc:
            logger.error(f"Invalid strategy: {exc}")
            raise typer.Exit(code=2) from exc
        except DynamizationError as exc:
            logger.error(f"Benchmark failed: {exc}")
            raise typer.Exit(code=1) from exc

    if as_json:
        typer.echo(json.dumps([result.to_dict() for result in results], indent=2))
        return

    for result in results:
        typer.echo(f"{result.strategy}:")
        typer.echo(f"  merges:              {result.merges}")
        typer.echo(f"  elements rebuilt:    {result.elements_touched} ({result.touched_per_insert:.2f} per insert)")
        typer.echo(f"  max rebuilt at once: {result.max_touched}")
        typer.echo(f"  max blocks merged:   {result.max_blocks_merged}")
        typer.echo(f"  blocks at end:       {result.blocks}")
        if drain:
            typer.echo(f"  global rebuilds:     {result.rebuilds}")
        typer.echo(f"  insert time:         {result.insert_seconds:.4f}s")
        if drain:
            typer.echo(f"  drain time:          {result.drain_seconds:.4f}s")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
