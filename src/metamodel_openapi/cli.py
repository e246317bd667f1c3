"""CLI entry point for metamodel-openapi."""

from pathlib import Path

import click

from metamodel_openapi.binding import BindingCalculator
from metamodel_openapi.buffer import FORMATS
from metamodel_openapi.errors import MetamodelError
from metamodel_openapi.generator.openapi import OpenApiGenerator
from metamodel_openapi.generator.paths import index_paths
from metamodel_openapi.model.concepts import Model
from metamodel_openapi.model.loader import load_model
from metamodel_openapi.names import NamesCalculator, to_snake
from metamodel_openapi.packages import PackagesCalculator
from metamodel_openapi.reporter import Reporter


def _load(model_path: Path) -> Model:
    try:
        return load_model(model_path)
    except MetamodelError as e:
        raise click.ClickException(str(e)) from e


@click.group()
def main():
    """metamodel-openapi: generate OpenAPI 3.0 documents from API models."""
    pass


@main.command()
@click.argument("model_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", required=True, envvar="METAMODEL_OUTPUT", type=click.Path(file_okay=False, path_type=Path), help="Output directory for the generated documents.")
@click.option("--format", "fmt", default="json", envvar="METAMODEL_FORMAT", type=click.Choice(FORMATS), help="Output document format.")
@click.option("-q", "--quiet", is_flag=True, help="Only print errors.")
def generate(model_path: Path, output: Path, fmt: str, quiet: bool):
    """Generate one OpenAPI document per service version."""
    reporter = Reporter(quiet=quiet)
    reporter.info("Loading model from %s...", model_path)
    model = _load(model_path)

    try:
        generator = OpenApiGenerator(
            reporter=reporter,
            model=model,
            output=output,
            names=NamesCalculator(),
            binding=BindingCalculator(),
            packages=PackagesCalculator(),
            fmt=fmt,
        )
        written = generator.run()
    except MetamodelError as e:
        raise click.ClickException(str(e)) from e

    reporter.info("Generated %d documents in %s", len(written), output)


@main.command()
@click.argument("model_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def paths(model_path: Path):
    """List the absolute paths and HTTP methods of every service version."""
    model = _load(model_path)
    binding = BindingCalculator()

    for service in model.services:
        for version in service.versions:
            click.echo(f"{to_snake(service.name)} {to_snake(version.name)}:")
            for absolute, path in index_paths(binding, service, version).items():
                verbs = " ".join(binding.method(m) for m in path.resource.methods)
                click.echo(f"  {absolute} {verbs}".rstrip())
