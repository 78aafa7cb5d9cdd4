#!/usr/bin/env python3
"""routedoc - Entry point."""
import json
import logging
import os
import sys

import click
from colorama import Fore, Style, init

from config import app_config
from routedoc import __version__, exporters, generate
from routedoc.constants import NullableStrategy
from routedoc.manifest import ManifestLoader

# Initialize colorama
init(autoreset=True)

logger = logging.getLogger(__name__)


def print_banner():
    """Print application banner."""
    print(f"{Fore.CYAN}{'=' * 44}")
    print(f"{Fore.CYAN}║   {Fore.WHITE}routedoc{Fore.CYAN}                             ║")
    print(f"{Fore.CYAN}║   {Fore.WHITE}API Description Generator{Fore.CYAN}            ║")
    print(f"{Fore.CYAN}{'=' * 44}{Style.RESET_ALL}")
    print()


def fail(message: str):
    click.echo(f"{Fore.RED}❌ {message}", err=True)
    sys.exit(1)


def load_manifest(source: str):
    loader = ManifestLoader(timeout=app_config.manifest.timeout, auth_token=app_config.manifest.auth_token)
    return loader.load(source)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """routedoc - Generate OpenAPI/Swagger documents from declarative manifests."""
    level = logging.DEBUG if verbose else getattr(logging, app_config.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@cli.command(name="generate")
@click.argument("manifest")
@click.option("--schema-type", default=None, help="Dialect: oas2, oas3, oas31 (or an alias)")
@click.option(
    "--nullable-strategy",
    type=click.Choice([s.value for s in NullableStrategy]),
    default=None,
    help="How nullable fields are rendered",
)
@click.option("--namespace", default=None, help="Only document paths under this prefix")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the document to this file (bare names go to ROUTEDOC_OUTPUT_DIR)",
)
@click.option("--title", default=None, help="Document title")
@click.option("--api-version", default=None, help="Document version")
def generate_command(manifest, schema_type, nullable_strategy, namespace, output, title, api_version):
    """Generate an API description document from MANIFEST (file or URL)."""
    try:
        loaded = load_manifest(manifest)
        info = dict(loaded.info)
        info["title"] = title or info.get("title") or app_config.title
        info["version"] = api_version or info.get("version") or app_config.version

        document = generate(
            loaded.routes,
            schema_type=schema_type or app_config.schema_type,
            nullable_strategy=nullable_strategy or app_config.nullable_strategy,
            namespace=namespace,
            **info,
        )
    except (RuntimeError, ValueError) as e:
        fail(str(e))
        return

    rendered = json.dumps(document, indent=2, ensure_ascii=False)
    if output is None:
        click.echo(rendered)
        return

    # bare file names land in the configured output directory
    directory = os.path.dirname(output)
    if not directory:
        directory = app_config.output_dir
        output = os.path.join(directory, output)
    os.makedirs(directory, exist_ok=True)
    with open(output, "w", encoding="utf-8") as f:
        f.write(rendered + "\n")
    click.echo(f"{Fore.GREEN}✅ Wrote {len(document.get('paths', {}))} paths to {output}", err=True)


@cli.command()
@click.argument("manifest")
def inspect(manifest):
    """Summarize the entities, contracts and routes of MANIFEST."""
    print_banner()

    try:
        summary = load_manifest(manifest).summary()
    except (RuntimeError, ValueError) as e:
        fail(str(e))
        return

    click.echo(f"{Fore.YELLOW}{summary['title'] or 'Untitled'} ({summary['version'] or '-'})")
    click.echo(f"{Fore.YELLOW}{'=' * 30}")
    for section in ("types", "entities", "contracts"):
        names = summary[section]
        click.echo(f"{Fore.WHITE}{section.capitalize()}: {len(names)}")
        for name in names:
            click.echo(f"  - {name}")

    click.echo(f"{Fore.WHITE}Routes: {len(summary['routes'])}")
    for route in summary["routes"]:
        click.echo(f"  {Fore.CYAN}{route}")


@cli.command()
def dialects():
    """List registered output dialects."""
    for schema_type in exporters.schema_types:
        exporter = exporters.for_type(schema_type)
        click.echo(f"{Fore.GREEN}{schema_type:8}{Style.RESET_ALL} {exporter.__name__}")


if __name__ == "__main__":
    cli()
