"""
worktree-wizard - Issue-driven git worktree manager with terminal automation
"""

from .__version__ import __version__
from .core import WorktreeOrchestrator
from .cli.main import main

__all__ = ["WorktreeOrchestrator", "main", "__version__"]
