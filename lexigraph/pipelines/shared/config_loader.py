from pathlib import Path
from typing import Type, TypeVar

import yaml
from pydantic import BaseModel
from rich.console import Console
from rich.table import Table

c = Console()

ConfigModel = TypeVar("ConfigModel", bound=BaseModel)

CONFIG_DIR = Path("config") / "pipelines"


def default_config_path(pipeline: str) -> Path:
	"""Default YAML location for a pipeline, relative to the working directory."""
	return CONFIG_DIR / f"{pipeline}.yaml"


def load_pipeline_config(path: Path, model: Type[ConfigModel], quiet: bool = False) -> ConfigModel:
	"""
	Load a pipeline's YAML hyperparameters and validate them.

	Args:
		path: YAML file to load
		model: pydantic model describing the pipeline's hyperparameters
		quiet: If True, suppresses printing the config table

	Raises:
		FileNotFoundError: If the config file does not exist
		pydantic.ValidationError: If a value is missing or has the wrong type
	"""
	c.rule(f"[bold cyan]Loading {model.__name__}")

	if not path.exists():
		c.print(f"[red]❌ Missing config file:[/] {path}")
		raise FileNotFoundError(f"Missing pipeline config: {path}")

	c.print(f"[green]✔ Found:[/] [cyan]{path}[/cyan] — loading...")
	with path.open("r", encoding="utf-8") as f:
		raw = yaml.safe_load(f) or {}

	cfg = model.model_validate(raw)
	c.print(f"[green]✔ Successfully parsed:[/] [white]{path.name}[/white]")

	if not quiet:
		tbl = Table(show_header=True, header_style="bold magenta")
		tbl.add_column("Field", style="dim")
		tbl.add_column("Value")
		for key, value in cfg.model_dump().items():
			tbl.add_row(key, str(value) if value not in (None, [], "") else "—")
		c.print(tbl)

	return cfg
