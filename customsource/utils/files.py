"""Utility functions for file and directory management in customsource."""

from pathlib import Path

WORKDIR_NAME = '.customsource'


def get_project_root() -> Path:
    """Find the project root by searching upwards from the Current Working Directory.

    Stops at the first directory containing a marker file.
    """
    current_path = Path.cwd()
    markers = {'.git', 'pyproject.toml', WORKDIR_NAME, 'requirements.txt'}

    for parent in [current_path] + list(current_path.parents):
        if any((parent / marker).exists() for marker in markers):
            return parent

    # No marker anywhere above, e.g. running in /tmp
    return current_path


def get_workdir_path() -> Path:
    """Return the path to the .customsource directory."""
    return get_project_root() / WORKDIR_NAME


def get_logs_path() -> Path:
    """Return the path to the logs directory in .customsource."""
    return get_workdir_path() / 'logs'


def is_initialized() -> bool:
    """Check if the .customsource directory exists in the project root."""
    return get_workdir_path().is_dir()


def init_customsource(storage_name: str = 'sources') -> Path:
    """Initialize .customsource directory and return the storage path."""
    workdir = get_workdir_path()
    storage_dir = workdir / storage_name

    storage_dir.mkdir(parents=True, exist_ok=True)
    get_logs_path().mkdir(parents=True, exist_ok=True)

    # Keep generated files out of source control
    gitignore = workdir / '.gitignore'
    if not gitignore.exists():
        gitignore.write_text('# Automatically created by customsource\n*\n')

    return storage_dir
