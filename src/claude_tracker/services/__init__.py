"""Services for Claude Tracker."""

from claude_tracker.services.pipeline import load_data
from claude_tracker.services.normalizer import normalize
from claude_tracker.services.claude_scanner import scan_claude_projects
from claude_tracker.services.cursor_scanner import scan_cursor_projects
from claude_tracker.services.project_merger import merge_projects
from claude_tracker.services.metrics import build_project_summaries, compute_global_metrics
from claude_tracker.services.config_manager import ConfigManager

__all__ = [
    "load_data",
    "normalize",
    "scan_claude_projects",
    "scan_cursor_projects",
    "merge_projects",
    "build_project_summaries",
    "compute_global_metrics",
    "ConfigManager",
]
