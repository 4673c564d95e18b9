"""Encode and decode project paths across the two log sources."""

import os
from urllib.parse import unquote

from claude_tracker.errors import UnresolvableProjectPath

FILE_URI_PREFIX = "file://"
REMOTE_URI_PREFIX = "vscode-remote://"


def decode_path(encoded: str) -> str:
    """Naively decode a Claude project directory name.

    -home-wiz-AI-LLM → /home/wiz/AI/LLM

    Hyphens inside folder names are indistinguishable from separators,
    so the result may not exist on disk.
    """
    if not encoded:
        return ""
    return "/" + encoded.lstrip("-").replace("-", "/")


def resolve_project_dir(encoded: str) -> str:
    """Decode a project slug and verify that the path exists.

    Raises UnresolvableProjectPath when it does not.
    """
    decoded = decode_path(encoded)
    if not decoded or not os.path.exists(decoded):
        raise UnresolvableProjectPath(encoded)
    return decoded


def decode_folder_uri(folder: str) -> str:
    """Turn a workspace ``folder`` URI into a local path.

    file:///Users/a/my%20proj → /Users/a/my proj

    Remote workspaces decode to "".
    """
    if not folder or folder.startswith(REMOTE_URI_PREFIX):
        return ""
    if folder.startswith(FILE_URI_PREFIX):
        folder = folder[len(FILE_URI_PREFIX):]
    return unquote(folder)


def normalize_path(path: str) -> str:
    """Strip trailing separators so /a/proj and /a/proj/ compare equal."""
    stripped = path.rstrip("/\\")
    return stripped if stripped else path[:1]


def extract_project_name(path: str) -> str:
    """Get the last path segment as the project display name.

    /home/wiz/AI/LLM → LLM
    """
    path = normalize_path(path)
    return path.replace("\\", "/").rsplit("/", 1)[-1] if path else ""
