"""CLI for dbmodel operations."""

import json
import logging
from pathlib import Path

import typer

from dbmodel import __version__
from dbmodel.config import DbModelConfig, find_config, load_config
from dbmodel.core.model import DbModel
from dbmodel.errors import DbModelError
from dbmodel.generator import DbModelGenerator
from dbmodel.links.updater import LinksUpdater
from dbmodel.loaders import FileSchemaSource, load_change_log
from dbmodel.views import model_view


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"dbmodel {__version__}")
        raise typer.Exit()


app = typer.Typer(
    help="dbmodel: entities and links from a relational schema",
    no_args_is_help=True,
)

# Global state for config (set in callback, used in commands)
_loaded_config: DbModelConfig | None = None


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-V", callback=version_callback, is_eager=True, help="Show version"
    ),
    config: Path = typer.Option(None, "--config", "-c", help="Path to config file (dbmodel.yaml)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log each generation step"),
):
    """dbmodel CLI.

    You can use a config file (dbmodel.yaml or dbmodel.json) to set default values.
    CLI arguments override config file values.
    """
    global _loaded_config

    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)

    config_path = config or find_config()
    _loaded_config = None
    if config_path:
        try:
            _loaded_config = load_config(config_path)
            typer.echo(f"Loaded config from: {config_path}", err=True)
        except (OSError, ValueError) as e:
            typer.echo(f"Warning: Failed to load config: {e}", err=True)


def _resolve_schema(schema: Path | None) -> Path:
    if schema is None and _loaded_config and _loaded_config.schema_file:
        schema = Path(_loaded_config.schema_file)
    if schema is None:
        typer.echo("Error: No schema file given (argument or schema_file in config)", err=True)
        raise typer.Exit(1)
    if not schema.exists():
        typer.echo(f"Error: Schema file {schema} does not exist", err=True)
        raise typer.Exit(1)
    return schema


def _print_model(model: DbModel, as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps(model_view(model), indent=2, default=str))
        return

    for entity in model.entities:
        kind = " (join table)" if entity.is_join_table else ""
        typer.echo(f"● {entity.class_name} [{entity.table_name}]{kind}")
        typer.echo(f"  Attributes: {len(entity.attribute_index)}")
        typer.echo(f"  Foreign keys: {len(entity.foreign_key_index)}")
        for link in entity.links:
            side = "owning" if link.owning_side else "inverse"
            typer.echo(
                f"  - {link.field_name}: {link.cardinality.value} -> {link.target_entity_class_name} ({side}, {link.id})"
            )
        for warning in entity.warnings:
            typer.echo(f"  ! {warning}")
        typer.echo()


@app.command()
def generate(
    schema: Path = typer.Argument(None, help="Schema snapshot file (YAML or JSON)"),
    as_json: bool = typer.Option(False, "--json", help="Print the model as JSON"),
):
    """
    Generate entities and links from a schema snapshot.

    Examples:
      dbmodel generate schema.yml
      dbmodel generate schema.yml --json
    """
    schema = _resolve_schema(schema)
    generator = DbModelGenerator(config=_loaded_config)
    try:
        model = generator.generate_from_source(FileSchemaSource(schema))
    except DbModelError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    _print_model(model, as_json)
    if not as_json:
        typer.echo(f"{len(model.links)} link(s) for {model.entity_count} entities")


@app.command()
def update(
    schema: Path = typer.Argument(..., help="Schema snapshot file the model is generated from"),
    changelog: Path = typer.Argument(..., help="Change log file (YAML or JSON)"),
    as_json: bool = typer.Option(False, "--json", help="Print the model as JSON"),
):
    """
    Apply a change log to the model generated from a schema snapshot.

    Examples:
      dbmodel update schema.yml changes.yml
    """
    schema = _resolve_schema(schema)
    if not changelog.exists():
        typer.echo(f"Error: Change log {changelog} does not exist", err=True)
        raise typer.Exit(1)

    generator = DbModelGenerator(config=_loaded_config)
    try:
        model = generator.generate_from_source(FileSchemaSource(schema))
        change_log = load_change_log(changelog, model, generator)
        count = LinksUpdater(generator.rules, generator.links_manager).update_links(model, change_log)
    except (DbModelError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    _print_model(model, as_json)
    if not as_json:
        typer.echo(f"{count} link(s) created or removed by {len(change_log)} change(s)")


if __name__ == "__main__":
    app()
