"""
Plugin catalog - the manifest plus the markdown agents, commands and skills.

Personas, commands and skills are prompts for the host model. We only read
their YAML frontmatter so the CLI can list what the plugin ships.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import IronClaudeError

logger = logging.getLogger(__name__)

MANIFEST_PATH = Path(".claude-plugin") / "plugin.json"
SKILL_FILE = "SKILL.md"
FRONTMATTER_DELIMITER = "---"


class PluginManifest(BaseModel):
    """.claude-plugin/plugin.json"""

    model_config = ConfigDict(extra="allow")

    name: str
    version: str = "0.0.0"
    description: str = ""
    author: Optional[Any] = None
    agents: str = "agents"
    commands: str = "commands"
    skills: str = "skills"
    hooks: str = "hooks/hooks.json"


@dataclass
class CatalogEntry:
    """One agent, command or skill document."""

    kind: str           # agent, command, skill
    name: str
    description: str
    path: Path
    metadata: dict = field(default_factory=dict)
    scripts: list[Path] = field(default_factory=list)  # Skills only


@dataclass
class PluginCatalog:
    manifest: PluginManifest
    root: Path
    agents: list[CatalogEntry] = field(default_factory=list)
    commands: list[CatalogEntry] = field(default_factory=list)
    skills: list[CatalogEntry] = field(default_factory=list)

    def entries(self) -> list[CatalogEntry]:
        return [*self.agents, *self.commands, *self.skills]

    def find(self, kind: str, name: str) -> Optional[CatalogEntry]:
        for entry in self.entries():
            if entry.kind == kind and entry.name == name:
                return entry
        return None


def load_manifest(plugin_root: str | Path) -> PluginManifest:
    """
    Read the plugin manifest.

    A plugin without a manifest gets defaults named after its directory.

    Raises:
        IronClaudeError: If the manifest exists but is invalid
    """
    plugin_root = Path(plugin_root)
    path = plugin_root / MANIFEST_PATH
    if not path.exists():
        logger.debug(f"No manifest at {path}, using defaults")
        return PluginManifest(name=plugin_root.resolve().name)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return PluginManifest(**data)
    except (json.JSONDecodeError, TypeError, ValidationError) as e:
        raise IronClaudeError(f"Invalid plugin manifest: {path}", details=str(e)) from e


def split_frontmatter(text: str) -> tuple[dict, str]:
    """
    Separate YAML frontmatter from a markdown body.

    Returns:
        (frontmatter dict, body). Documents without frontmatter yield {}.

    Raises:
        yaml.YAMLError: If the frontmatter block is not valid YAML
    """
    lines = text.splitlines()
    if not lines or lines[0].strip() != FRONTMATTER_DELIMITER:
        return {}, text

    for index in range(1, len(lines)):
        if lines[index].strip() == FRONTMATTER_DELIMITER:
            header = yaml.safe_load("\n".join(lines[1:index])) or {}
            if not isinstance(header, dict):
                raise yaml.YAMLError("frontmatter is not a mapping")
            return header, "\n".join(lines[index + 1:])

    # Opening delimiter without a closing one: treat as plain markdown
    return {}, text


def read_entry(kind: str, path: Path, fallback_name: str) -> CatalogEntry:
    """Build a catalog entry from one markdown file."""
    try:
        header, _ = split_frontmatter(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Ignoring unreadable frontmatter in {path}: {e}")
        header = {}

    name = str(header.pop("name", "") or fallback_name)
    description = str(header.pop("description", "") or "").strip()
    return CatalogEntry(kind=kind, name=name, description=description, path=path, metadata=header)


def discover(plugin_root: str | Path) -> PluginCatalog:
    """
    Index the plugin's agents, commands and skills.

    Args:
        plugin_root: Directory holding .claude-plugin/ and the content dirs

    Returns:
        PluginCatalog sorted by file name within each kind
    """
    plugin_root = Path(plugin_root)
    manifest = load_manifest(plugin_root)
    catalog = PluginCatalog(manifest=manifest, root=plugin_root)

    agents_dir = plugin_root / manifest.agents
    if agents_dir.is_dir():
        for path in sorted(agents_dir.glob("*.md")):
            catalog.agents.append(read_entry("agent", path, path.stem))

    commands_dir = plugin_root / manifest.commands
    if commands_dir.is_dir():
        for path in sorted(commands_dir.glob("*.md")):
            catalog.commands.append(read_entry("command", path, path.stem))

    skills_dir = plugin_root / manifest.skills
    if skills_dir.is_dir():
        for skill_dir in sorted(p for p in skills_dir.iterdir() if p.is_dir()):
            skill_file = skill_dir / SKILL_FILE
            if not skill_file.is_file():
                continue
            entry = read_entry("skill", skill_file, skill_dir.name)
            scripts_dir = skill_dir / "scripts"
            if scripts_dir.is_dir():
                entry.scripts = sorted(p for p in scripts_dir.iterdir() if p.is_file())
            catalog.skills.append(entry)

    logger.info(
        f"Cataloged {len(catalog.agents)} agents, {len(catalog.commands)} commands, "
        f"{len(catalog.skills)} skills"
    )
    return catalog
