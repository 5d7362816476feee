"""Target-file resolution shared by the per-file PostToolUse hooks."""

from pathlib import Path

from ..errors import HookInputError


def resolve_target(file_path: str | Path | None, project_dir: str | Path) -> Path:
    """
    Turn the hook's file argument into a path.

    Relative paths are taken from the project root, where the host's tools
    operate.

    Raises:
        HookInputError: If no file path was provided
    """
    if file_path is None or not str(file_path).strip():
        raise HookInputError("No file path provided")

    path = Path(file_path)
    if not path.is_absolute():
        path = Path(project_dir) / path
    return path
