"""Run configuration handed to the pipeline and presentation layer."""

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_MAX_WORKERS = min(32, (os.cpu_count() or 1) + 4)
DEFAULT_THEME = "dark"
THEMES = ("dark", "light", "mono")


def default_claude_projects_dir() -> Path:
    return Path.home() / ".claude" / "projects"


def default_cursor_user_dir() -> Path:
    """Cursor's per-user data directory for the current platform."""
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "Cursor" / "User"
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        base = Path(appdata) if appdata else Path.home() / "AppData" / "Roaming"
        return base / "Cursor" / "User"
    config_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(config_home) if config_home else Path.home() / ".config"
    return base / "Cursor" / "User"


@dataclass(frozen=True)
class TrackerConfig:
    claude_projects_dir: Path = field(default_factory=default_claude_projects_dir)
    cursor_user_dir: Path = field(default_factory=default_cursor_user_dir)
    max_workers: int = DEFAULT_MAX_WORKERS
    theme: str = DEFAULT_THEME

    def __post_init__(self):
        object.__setattr__(self, "claude_projects_dir", Path(self.claude_projects_dir).expanduser())
        object.__setattr__(self, "cursor_user_dir", Path(self.cursor_user_dir).expanduser())
        object.__setattr__(self, "max_workers", max(1, int(self.max_workers)))
        if self.theme not in THEMES:
            object.__setattr__(self, "theme", DEFAULT_THEME)

    @property
    def cursor_workspace_storage_dir(self) -> Path:
        return self.cursor_user_dir / "workspaceStorage"

    @property
    def cursor_global_db_path(self) -> Path:
        return self.cursor_user_dir / "globalStorage" / "state.vscdb"
