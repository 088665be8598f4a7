"""Command-line interface for codefetch."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

import click

from codefetch import __version__
from codefetch.config import (
    CONFIG_FILE,
    CodefetchConfig,
    ensure_ignore_file,
    load_config,
    normalize_extensions,
    save_config,
    set_config_value,
)
from codefetch.exceptions import CodefetchError
from codefetch.ui.console import Console, setup_logging

console = Console()


def _get_project_root(path: str | None = None) -> Path:
    """Resolve the project root or error."""
    root = Path(path or ".").resolve()
    if not root.is_dir():
        console.error(f"Path does not exist: {path}")
        sys.exit(1)
    return root


def _load_config_or_exit(root: Path) -> CodefetchConfig:
    try:
        return load_config(root)
    except CodefetchError as e:
        console.error(str(e))
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="codefetch")
def main():
    """codefetch - turn a source tree into one token-budgeted Markdown document."""
    pass


@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
def init(path: str | None):
    """Create .codefetchignore and a default codefetch.config.json."""
    root = _get_project_root(path)

    if ensure_ignore_file(root):
        console.success(
            "Created .codefetchignore. Add 'codefetch/' to your .gitignore "
            "to avoid committing fetched code."
        )
    else:
        console.info(".codefetchignore already exists")

    if (root / CONFIG_FILE).exists():
        console.info(f"{CONFIG_FILE} already exists")
    else:
        save_config(root, CodefetchConfig())
        console.success(f"Created {CONFIG_FILE}")


@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
@click.option("--output", "-o", default=None, help="Write to codefetch/<FILE> instead of stdout.")
@click.option(
    "--max-tokens", "-t", type=click.IntRange(min=1), default=None,
    help="Limit output tokens.",
)
@click.option("--extension", "-e", default=None, help="Only include these extensions (.ts,.js).")
@click.option("--tree/--no-tree", default=None, help="Prepend the project structure.")
@click.option("--line-numbers/--no-line-numbers", default=None, help="Number source lines.")
@click.option("--encoder", default=None, help="Token encoder: simple, p50k, cl100k, o200k.")
@click.option("--stream", is_flag=True, help="Emit the document file by file.")
@click.option("--cache/--no-cache", default=None, help="Reuse documents for unchanged inputs.")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed processing information.")
def fetch(
    path: str | None, output: str | None, max_tokens: int | None,
    extension: str | None, tree: bool | None, line_numbers: bool | None,
    encoder: str | None, stream: bool, cache: bool | None, verbose: bool,
):
    """Collect the project's files into a single context document."""
    root = _get_project_root(path)
    setup_logging(verbose, console)
    config = _load_config_or_exit(root)

    overrides = {
        "output_file": output,
        "max_tokens": max_tokens,
        "extensions": normalize_extensions(extension) if extension else None,
        "include_tree": tree,
        "disable_line_numbers": None if line_numbers is None else not line_numbers,
        "token_encoder": encoder,
    }
    config = config.model_copy(update={k: v for k, v in overrides.items() if v is not None})
    if cache is not None:
        config.cache.enabled = cache

    if stream and config.include_tree:
        console.warning("Project structure is not available in stream mode; skipping it")

    try:
        if stream:
            stats = asyncio.run(_fetch_stream(root, config))
        else:
            stats = asyncio.run(_fetch_batch(root, config))
    except CodefetchError as e:
        console.error(str(e))
        sys.exit(1)

    if config.output_file:
        console.success("Code was successfully fetched")
        console.show_summary(stats)


async def _fetch_batch(root: Path, config: CodefetchConfig) -> dict:
    from codefetch.files import load_records, walk
    from codefetch.markdown import assemble
    from codefetch.tokens import count_tokens

    options = config.to_assembly_options()
    matcher = _matcher_for(root, config)
    files = walk(root, matcher, config.extensions)
    records = load_records(root, files)

    if config.cache.enabled:
        from codefetch.cache import cached_assemble, create_cache

        backend = create_cache(_cache_options(config), runtime=_cache_runtime(config))
        document = await cached_assemble(records, options, backend)
    else:
        document = await assemble(records, options)

    if config.output_file:
        output_path = _prepare_output(root, config)
        output_path.write_text(document, encoding="utf-8")
    else:
        click.echo(document)
        output_path = None

    return {
        "files": len(records),
        "encoder": options.token_encoder,
        "tokens": await count_tokens(document, options.token_encoder),
        "max_tokens": options.max_tokens,
        "output": output_path,
    }


async def _fetch_stream(root: Path, config: CodefetchConfig) -> dict:
    from codefetch.files import iter_files, iter_records
    from codefetch.markdown import assemble_stream
    from codefetch.tokens import count_tokens

    options = config.to_assembly_options()
    matcher = _matcher_for(root, config)
    records = iter_records(root, iter_files(root, matcher, config.extensions))

    output_path = _prepare_output(root, config) if config.output_file else None
    sink = output_path.open("w", encoding="utf-8") if output_path else None
    sections = 0
    tokens = 0
    try:
        async for chunk in assemble_stream(records, options):
            if chunk.startswith("## "):
                sections += 1
            if sink is not None:
                sink.write(chunk)
                tokens += await count_tokens(chunk, options.token_encoder)
            else:
                click.echo(chunk, nl=False)
    finally:
        if sink is not None:
            sink.close()

    return {
        "files": sections,
        "encoder": options.token_encoder,
        "tokens": tokens,
        "max_tokens": options.max_tokens,
        "output": output_path,
    }


def _matcher_for(root: Path, config: CodefetchConfig):
    """Ignore rules for the walk, with the configured output directory excluded."""
    from codefetch.files import PatternMatcher

    output_dir = (root / config.output_dir).resolve()
    try:
        rel_dir = output_dir.relative_to(root).as_posix()
    except ValueError:
        # Output lives outside the project; the walk never reaches it
        rel_dir = None
    extra_rules = f"/{rel_dir}/" if rel_dir and rel_dir != "." else None
    return PatternMatcher.for_root(root, extra_rules=extra_rules)


def _prepare_output(root: Path, config: CodefetchConfig) -> Path:
    """Create the output directory (and .codefetchignore) and return the target path."""
    output_dir = root / config.output_dir
    if not output_dir.exists():
        output_dir.mkdir(parents=True, exist_ok=True)
        console.info(f"Created {config.output_dir} directory.")
    if ensure_ignore_file(root):
        console.info(
            "Created .codefetchignore file. Add 'codefetch/' to your .gitignore "
            "to avoid committing fetched code."
        )
    return output_dir / config.output_file


def _cache_options(config: CodefetchConfig):
    from codefetch.cache import CacheOptions

    return CacheOptions(
        ttl_seconds=config.cache.ttl_seconds,
        max_entries=config.cache.max_entries,
        cache_dir=Path(config.cache.directory).expanduser() if config.cache.directory else None,
    )


def _cache_runtime(config: CodefetchConfig):
    from codefetch.cache import Runtime

    return {
        "auto": None,
        "memory": Runtime.MEMORY,
        "filesystem": Runtime.SERVER,
    }[config.cache.backend]


@main.command("config")
@click.argument("action", type=click.Choice(["set", "get", "show"]))
@click.argument("key", required=False)
@click.argument("value", required=False)
@click.option("--path", "-p", default=None, help="Path to the project root.")
def config_cmd(action: str, key: str | None, value: str | None, path: str | None):
    """Manage codefetch configuration."""
    root = _get_project_root(path)
    config = _load_config_or_exit(root)

    if action == "show":
        console.console.print_json(json.dumps(config.model_dump(), indent=2))
    elif action == "get":
        if not key:
            console.error("Usage: codefetch config get <key>")
            sys.exit(1)
        data = config.model_dump()
        for part in key.split("."):
            if isinstance(data, dict) and part in data:
                data = data[part]
            else:
                console.error(f"Unknown key: {key}")
                sys.exit(1)
        console.console.print(f"{key} = {data}")
    elif action == "set":
        if not key or value is None:
            console.error("Usage: codefetch config set <key> <value>")
            sys.exit(1)
        try:
            # Try to parse as JSON for non-string values
            try:
                parsed_value = json.loads(value)
            except json.JSONDecodeError:
                parsed_value = value

            config = set_config_value(config, key, parsed_value)
            save_config(root, config)
            console.success(f"Set {key} = {parsed_value}")
        except KeyError:
            console.error(f"Unknown config key: {key}")
            sys.exit(1)
        except CodefetchError as e:
            console.error(str(e))
            sys.exit(1)


if __name__ == "__main__":
    main()
