from collections.abc import Iterable
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Annotated

import typer

from .config import CONFIG_FILENAME, AppConfig
from .execute import EXIT_FAILURE, ExecutionError, run_and_report
from .models import Query
from .query import build_query
from .walker import ErrorHandler, ignore_error, iter_matches, report_error, walk

app: typer.Typer = typer.Typer(
    help="treefind: find files by inode, name, size or hard link count",
    add_completion=False,
)


def print_version(is_version: bool) -> None:
    """
    Eager callback for --version / -V on the single find command.

    Runs before PATH and the search options are validated, so
    `treefind --version` works without a directory to search.
    """
    if not is_version:
        return

    try:
        ver: str = version(distribution_name="treefind")
    except PackageNotFoundError:
        ver = "unknown (package not installed)"

    typer.echo(ver)
    raise typer.Exit()


def load_config(config_path: Path | None, *, creating: bool = False) -> AppConfig:
    if config_path is None:
        return AppConfig.load_default()
    if creating and not config_path.exists():
        return AppConfig()
    return AppConfig.load(config_path)


def print_matches(paths: Iterable[str], null_separator: bool) -> None:
    for path in paths:
        if null_separator:
            typer.echo(f"{path}\0", nl=False)
        else:
            typer.echo(path)


def run_search(query: Query, cfg: AppConfig) -> None:
    on_error: ErrorHandler = ignore_error if cfg.quiet else report_error

    if query.exec_path is None:
        print_matches(iter_matches(query, on_error), cfg.null_separator)
        return

    # Traversal completes before the target is started
    results: list[str] = walk(query, on_error)
    print_matches(results, cfg.null_separator)

    try:
        run_and_report(query.exec_path, results)
    except ExecutionError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=EXIT_FAILURE)


@app.command()
def find(
    root_path: Annotated[
        str | None, typer.Argument(metavar="PATH", help="Directory to search.", show_default=False)
    ] = None,
    inum: Annotated[int | None, typer.Option("-inum", min=0, help="Inode number.")] = None,
    name: Annotated[str | None, typer.Option("-name", help="Exact file name.")] = None,
    size: Annotated[
        str | None,
        typer.Option(
            "-size", metavar="SIZE", help="Size in bytes prefixed with -, = or + (less, equal, greater)."
        ),
    ] = None,
    nlinks: Annotated[int | None, typer.Option("-nlinks", min=0, help="Number of hard links.")] = None,
    exec_path: Annotated[
        str | None, typer.Option("-exec", metavar="PATH", help="Program to run with the found files.")
    ] = None,
    print0: Annotated[bool, typer.Option("-print0", help="Terminate found paths with NUL.")] = False,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Do not report unreadable entries.")] = False,
    config_path: Annotated[
        Path | None, typer.Option("--config", help=f"Config file, defaults to ./{CONFIG_FILENAME}.")
    ] = None,
    save_config: Annotated[
        bool, typer.Option("--save-config", help="Write the effective config and exit.")
    ] = False,
    _version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=print_version,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """
    Search PATH breadth-first for files matching all given options.

    Directories are descended into but never reported. With -exec, the
    program is started once with every found path as its arguments and
    its exit status is reported.
    """
    try:
        cfg: AppConfig = load_config(config_path, creating=save_config)
    except (FileNotFoundError, ValueError, TypeError) as e:
        raise typer.BadParameter(str(e), param_hint="'--config'")

    if quiet:
        cfg.quiet = True
    if print0:
        cfg.null_separator = True

    if save_config:
        target: Path = config_path if config_path is not None else CONFIG_FILENAME
        cfg.save(target)
        typer.echo(f"Config written to {target}")
        raise typer.Exit()

    try:
        query: Query = build_query(
            root_path,
            inum=inum,
            name=name,
            size=size,
            nlinks=nlinks,
            exec_path=exec_path,
        )
    except ValueError as e:
        raise typer.BadParameter(str(e))

    run_search(query, cfg)


if __name__ == "__main__":
    app()
