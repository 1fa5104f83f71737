"""Command-line interface for infrahub-pygen."""

import logging
import shutil
import tarfile
import tempfile
import zipfile
from pathlib import Path

import click
import httpx

from . import __version__
from .core.config import ClientConfig, GeneratorConfig
from .core.errors import InfrahubError, SchemaLoadError
from .core.generator import CodeGenerator
from .core.ir import IRDocument
from .core.parser import SchemaParser, parse_schema
from .core.registry import SchemaRegistry

ARCHIVE_SUFFIXES = (".zip", ".tar.gz", ".tgz")


def extract_archive(archive_path: Path) -> str:
    """Extract archive to temp directory. Returns path to extracted content."""
    temp_dir = tempfile.mkdtemp()
    if archive_path.suffix == ".zip":
        with zipfile.ZipFile(archive_path, "r") as zip_ref:
            zip_ref.extractall(temp_dir)
    elif archive_path.name.endswith((".tar.gz", ".tgz")):
        with tarfile.open(archive_path, "r:gz") as tar_ref:
            try:
                _extract_tar(tar_ref, temp_dir)
            except SchemaLoadError:
                shutil.rmtree(temp_dir)
                raise
    else:
        shutil.rmtree(temp_dir)
        raise SchemaLoadError(f"Unsupported archive format: {archive_path.suffix}")
    return temp_dir


def _extract_tar(tar_ref: tarfile.TarFile, target: str):
    """Extract regular files and directories that stay inside target."""
    if hasattr(tarfile, "data_filter"):
        try:
            tar_ref.extractall(target, filter="data")
        except tarfile.FilterError as e:
            raise SchemaLoadError(f"Unsafe archive member: {e}") from e
        return
    # Interpreters before 3.10.12 and 3.11.4 have no extraction filters
    root = Path(target).resolve()
    for member in tar_ref.getmembers():
        if not (member.isfile() or member.isdir()):
            raise SchemaLoadError(f"Unsafe archive member: {member.name}")
        if not (root / member.name).resolve().is_relative_to(root):
            raise SchemaLoadError(f"Unsafe archive member: {member.name}")
    tar_ref.extractall(target)


def fetch_schema(url: str, token: str | None, branch: str | None) -> str:
    """Download the SDL text of an Infrahub instance."""
    config = ClientConfig(url, token or "", default_branch=branch)
    config.validate()
    schema_url = config.schema_url()
    try:
        response = httpx.get(schema_url, **config.client_kwargs())
    except httpx.HTTPError as e:
        raise SchemaLoadError(f"failed to load schema from {schema_url}: {e}") from e
    if not response.is_success:
        raise SchemaLoadError(f"failed to load schema: schema http error: {response.status_code}")
    return response.text


def load_schema(schema: str | None, url: str | None, token: str | None, branch: str | None, verbose: bool) -> IRDocument:
    """Parse the schema from a path or archive, or fetch it from a running instance."""
    if url:
        click.echo(f"Fetching schema from {url}...")
        return parse_schema(fetch_schema(url, token, branch), source=url)

    schema_path = Path(schema).resolve()
    temp_dir = None
    try:
        # Handle archives
        actual_schema_path = schema_path
        if schema_path.is_file() and schema_path.name.lower().endswith(ARCHIVE_SUFFIXES):
            click.echo(f"Extracting archive {schema_path.name}...")
            temp_dir = extract_archive(schema_path)
            actual_schema_path = Path(temp_dir)
            if verbose:
                click.echo(f"  Extracted to: {temp_dir}")

        if verbose:
            click.echo(f"Schema: {actual_schema_path}")

        click.echo("Parsing schema...")
        return SchemaParser(str(actual_schema_path)).parse_all()
    finally:
        # Clean up temp directory
        if temp_dir:
            shutil.rmtree(temp_dir)


def write_files(files: dict[str, str], output_path: Path):
    """Write the generated mapping below the output directory."""
    for relative_path, content in files.items():
        target = output_path / relative_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")


@click.group()
@click.version_option(version=__version__)
def main():
    """Typed Python client generator for Infrahub.

    Generate pydantic models and async clients from an Infrahub GraphQL schema.
    """
    pass


@main.command()
@click.option(
    "--schema",
    "-s",
    type=click.Path(exists=True),
    help="Path to GraphQL schema file, directory, or archive (.zip, .tar.gz, .tgz).",
)
@click.option(
    "--url",
    envvar="INFRAHUB_ADDRESS",
    help="Base URL of an Infrahub instance to fetch the schema from.",
)
@click.option(
    "--token",
    envvar="INFRAHUB_API_TOKEN",
    help="API token used with --url.",
)
@click.option(
    "--branch",
    "-b",
    help="Branch to fetch the schema from (with --url).",
)
@click.option(
    "--out",
    "-o",
    required=True,
    type=click.Path(),
    help="Output directory for generated code.",
)
@click.option(
    "--package-name",
    "-n",
    help="Emit an installable package with this name (adds pyproject.toml).",
)
@click.option(
    "--base-path",
    type=click.Path(exists=True, file_okay=False),
    help="Local infrahub-pygen checkout the generated package should depend on.",
)
@click.option(
    "--template-dir",
    type=click.Path(exists=True, file_okay=False),
    help="Directory with Jinja2 templates overriding the bundled ones.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
def generate(
    schema: str | None,
    url: str | None,
    token: str | None,
    branch: str | None,
    out: str,
    package_name: str | None,
    base_path: str | None,
    template_dir: str | None,
    verbose: bool,
):
    """Generate a typed client from an Infrahub schema.

    Examples:

        infrahub-pygen generate --schema ./schema.graphql --out ./generated

        infrahub-pygen generate -s ./schema.tgz -o ./client -n my-infrahub-client

        infrahub-pygen generate --url https://infrahub.example.com --token $TOKEN -o ./generated
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)

    if bool(schema) == bool(url):
        raise click.UsageError("Pass exactly one of --schema or --url.")

    output_path = Path(out).resolve()
    if verbose:
        click.echo(f"Output: {output_path}")

    try:
        document = load_schema(schema, url, token, branch, verbose)
        registry = SchemaRegistry.build(document)

        if verbose:
            click.echo(f"  Scalars: {len(registry.scalars)}")
            click.echo(f"  Enums: {len(registry.enums)}")
            click.echo(f"  Objects: {len(registry.objects)}")
            click.echo(f"  Inputs: {len(registry.inputs)}")
            click.echo(f"  Unions: {len(registry.unions)}")

        click.echo("Generating code...")
        config = GeneratorConfig(
            package_name=package_name,
            base_path=str(Path(base_path).resolve()) if base_path else None,
            template_dir=template_dir,
        )
        files = CodeGenerator(registry, config).generate()

        if verbose:
            for relative_path in files:
                click.echo(f"  {relative_path}")

        write_files(files, output_path)
    except InfrahubError as e:
        raise click.ClickException(str(e)) from e
    except OSError as e:
        raise click.ClickException(f"codegen failed: {e}") from e

    click.echo(f"Done! Generated {len(files)} files in {output_path}")


if __name__ == "__main__":
    main()
