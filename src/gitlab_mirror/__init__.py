"""
GitLab Mirror - mirror a GitLab account's group hierarchy locally.

This package provides:
- GitLabMirror: Fetch groups and projects, create namespace directories, clone
- Config: Configuration file and settings resolution
"""

__version__ = "1.0.0"

from .cloner import GitLabMirror, CloneOrchestrator
from .config import Config, MirrorSettings

__all__ = ["GitLabMirror", "CloneOrchestrator", "Config", "MirrorSettings"]
