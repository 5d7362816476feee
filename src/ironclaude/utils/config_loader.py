"""Configuration loader."""

import os
import logging
import yaml
from pathlib import Path
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from ..errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_STATE_DIR = ".iron-claude"
DEFAULT_CONFIG_NAME = "config.yaml"

TRUTHY = {"1", "true", "yes", "on"}


class ToolSettings(BaseModel):
    """How to invoke one external tool."""

    command: str
    timeout: int = Field(120, gt=0, description="Seconds before the tool is abandoned")
    extra_args: list[str] = Field(default_factory=list)


class IronConfig(BaseModel):
    """Iron-claude configuration model."""

    state_dir: str = DEFAULT_STATE_DIR
    milestone_file: str = "milestone.json"

    rubocop: ToolSettings = Field(default_factory=lambda: ToolSettings(command="rubocop"))
    shellcheck: ToolSettings = Field(
        default_factory=lambda: ToolSettings(command="shellcheck", timeout=30)
    )
    brakeman: ToolSettings = Field(
        default_factory=lambda: ToolSettings(command="brakeman", timeout=600)
    )
    bundle: ToolSettings = Field(
        default_factory=lambda: ToolSettings(command="bundle", timeout=300)
    )

    brakeman_report: str = "tmp/brakeman-report.json"
    lint_exclude: list[str] = Field(default_factory=lambda: ["node_modules", ".git"])
    query_scan_max_matches: int = Field(10, gt=0)

    log_level: str = "WARNING"
    json_logs: bool = False

    def milestone_path(self, project_dir: str | Path) -> Path:
        """Absolute location of the milestone file for a project."""
        return Path(project_dir) / self.state_dir / self.milestone_file


def default_config_path(project_dir: str | Path) -> Path:
    """Path of the project-level config file."""
    return Path(project_dir) / DEFAULT_STATE_DIR / DEFAULT_CONFIG_NAME


def load_config(
    config_path: str | Path | None = None,
    project_dir: str | Path = ".",
) -> IronConfig:
    """
    Load iron-claude configuration.

    Resolution order for the file: explicit path, IRON_CLAUDE_CONFIG,
    then <project>/.iron-claude/config.yaml. A missing file yields defaults.
    Environment variables (optionally from <project>/.env) override the
    logging fields.

    Args:
        config_path: Path to config file
        project_dir: Project root used for default locations

    Returns:
        Loaded configuration

    Raises:
        ConfigError: If the file is not valid YAML or fails validation
    """
    env_file = Path(project_dir) / ".env"
    if env_file.exists():
        load_dotenv(env_file)

    if config_path is None:
        config_path = os.getenv("IRON_CLAUDE_CONFIG") or default_config_path(project_dir)
    config_path = Path(config_path)

    config_data: dict = {}
    if config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}", details=str(e)) from e
        if not isinstance(config_data, dict):
            raise ConfigError(f"Config root must be a mapping: {config_path}")
        logger.debug(f"Loaded config: {config_path}")
    else:
        logger.debug(f"No config file at {config_path}, using defaults")

    env_level = os.getenv("IRON_CLAUDE_LOG_LEVEL")
    if env_level:
        config_data["log_level"] = env_level
    env_json = os.getenv("IRON_CLAUDE_JSON_LOGS")
    if env_json:
        config_data["json_logs"] = env_json.strip().lower() in TRUTHY

    try:
        return IronConfig(**config_data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_path}", details=str(e)) from e
