"""Configuration file format for dbmodel."""

from pathlib import Path

from pydantic import BaseModel, Field

from dbmodel.loaders import read_data

CONFIG_FILE_NAMES = ["dbmodel.yaml", "dbmodel.yml", "dbmodel.json"]


class DbModelConfig(BaseModel):
    """Generation settings read from dbmodel.yaml, dbmodel.yml or dbmodel.json.

    Example YAML:
        schema_file: ./schema.yml
        database_name: shop
        table_types: [TABLE]
        table_name_exclude: "^TMP_"
    """

    schema_file: str | None = Field(default=None, description="Schema snapshot file (YAML or JSON)")
    database_name: str = Field(default="", description="Logical database name (defaults to the snapshot's)")
    database_id: int | None = Field(default=None, description="Database id")
    table_types: list[str] = Field(
        default_factory=lambda: ["TABLE"], description="Table types to keep (empty list keeps all)"
    )
    table_name_include: str | None = Field(default=None, description="Regex a table name must match")
    table_name_exclude: str | None = Field(default=None, description="Regex excluding matching table names")

    def resolve_paths(self, base_dir: Path | None = None) -> "DbModelConfig":
        """Return a copy whose schema_file is absolute, relative ones taken from base_dir (cwd by default)."""
        if not self.schema_file or Path(self.schema_file).is_absolute():
            return self.model_copy()
        schema_path = ((base_dir or Path.cwd()) / self.schema_file).resolve()
        return self.model_copy(update={"schema_file": str(schema_path)})


def load_config(config_path: Path) -> DbModelConfig:
    """Read a dbmodel.yaml / dbmodel.json file.

    Paths in the file are relative to the directory holding it.

    Raises:
        FileNotFoundError: If the file is missing
        ValueError: If the format is not YAML or JSON, or the content is not a valid config
    """
    config = DbModelConfig.model_validate(read_data(config_path))
    return config.resolve_paths(config_path.parent)


def find_config(start_dir: Path | None = None) -> Path | None:
    """Look for a config file in start_dir (cwd by default), then in each parent directory.

    Within one directory, names are tried in CONFIG_FILE_NAMES order.
    """
    directory = (start_dir or Path.cwd()).resolve()
    for candidate_dir in (directory, *directory.parents):
        for name in CONFIG_FILE_NAMES:
            candidate = candidate_dir / name
            if candidate.is_file():
                return candidate
    return None
