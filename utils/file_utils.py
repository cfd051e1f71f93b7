from __future__ import annotations

import os
from pathlib import Path

__all__: list[str] = ["FileUtils"]


class FileUtils:
    """Utility class for resolving user-supplied file paths."""

    @staticmethod
    def resolve_path(path: str | Path, *, strict: bool = False) -> Path:
        """Convert a user-input path to an absolute path safely.

        Expands environment variables (e.g., $HOME, %APPDATA%), expands ~ to the home directory,
        and resolves relative paths based on the current working directory.
        Optionally resolves symbolic links with `.resolve()`.

        Args:
            path (str | Path): The input path (e.g., "~/cache/$APP_ENV/translation_cache.db").
            strict (bool): Whether to raise an exception if the path does not exist. Defaults to False.

        Returns:
            Path: The converted absolute `Path` object.
        """
        path_str = str(path)
        expanded: str = os.path.expandvars(path_str)
        user_expanded: Path = Path(expanded).expanduser()

        resolved_path: Path
        if user_expanded.is_absolute():
            resolved_path = user_expanded.resolve(strict=strict)
        else:
            resolved_path = (Path.cwd() / user_expanded).resolve(strict=strict)
        return resolved_path

    @staticmethod
    def ensure_parent_dir(file_path: Path) -> Path:
        """Create the parent directory of ``file_path`` if it does not exist yet."""
        file_path.parent.mkdir(parents=True, exist_ok=True)
        return file_path
