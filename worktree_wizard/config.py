"""Configuration handling for worktree-wizard"""

from dataclasses import dataclass, field
from typing import Optional, List

from worktree_wizard.constants import DEFAULT_COMMAND_TIMEOUT, DEFAULT_SETUP_TIMEOUT


@dataclass
class FrameConfig:
    """Template for one terminal pane."""

    enabled: bool = True
    command: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "FrameConfig":
        return cls(enabled=bool(data.get("enabled", True)), command=data.get("command", "") or "")


@dataclass
class Config:
    """Configuration for worktree-wizard with validation."""

    repository_path: str = ""

    # Terminal automation
    terminal_type: str = "iterm"
    frame1: FrameConfig = field(default_factory=lambda: FrameConfig(True, "npm run dev"))
    frame2: FrameConfig = field(default_factory=lambda: FrameConfig(True, "claude"))
    default_ai_command: str = "claude"

    # Post-create setup (None = skip setup)
    setup_commands: Optional[List[str]] = field(default_factory=lambda: ["npm install"])

    # Issue tracker integration
    github_issues_enabled: bool = True

    # Branching
    base_branch: Optional[str] = None  # None = detect the default branch

    # Subprocess limits (seconds)
    command_timeout: float = DEFAULT_COMMAND_TIMEOUT
    setup_timeout: float = DEFAULT_SETUP_TIMEOUT

    # Output
    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_frames()
        self._validate_ai_command()
        self._validate_setup_commands()
        self._validate_base_branch()
        self._validate_timeouts()

    def _validate_frames(self):
        """Accept plain dicts for frames."""
        if isinstance(self.frame1, dict):
            self.frame1 = FrameConfig.from_dict(self.frame1)
        if isinstance(self.frame2, dict):
            self.frame2 = FrameConfig.from_dict(self.frame2)

    def _validate_ai_command(self):
        """Validate default_ai_command is not empty."""
        if not self.default_ai_command or not self.default_ai_command.strip():
            raise ValueError("default_ai_command cannot be empty")
        self.default_ai_command = self.default_ai_command.strip()

    def _validate_setup_commands(self):
        """Validate setup_commands is None or a list of non-empty strings."""
        if self.setup_commands is None:
            return
        if not isinstance(self.setup_commands, list):
            raise ValueError("setup_commands must be a list or None")
        for command in self.setup_commands:
            if not isinstance(command, str) or not command.strip():
                raise ValueError(f"setup_commands entries must be non-empty strings, got {command!r}")

    def _validate_base_branch(self):
        """Normalise an empty base_branch to None."""
        if self.base_branch is not None:
            self.base_branch = self.base_branch.strip() or None

    def _validate_timeouts(self):
        """Validate timeouts are positive."""
        if self.command_timeout <= 0:
            raise ValueError(f"command_timeout must be positive, got {self.command_timeout}")
        if self.setup_timeout <= 0:
            raise ValueError(f"setup_timeout must be positive, got {self.setup_timeout}")

    def to_dict(self) -> dict:
        """Convert config to a plain dictionary."""
        return {
            "repository_path": self.repository_path,
            "terminal_type": self.terminal_type,
            "frame1": {"enabled": self.frame1.enabled, "command": self.frame1.command},
            "frame2": {"enabled": self.frame2.enabled, "command": self.frame2.command},
            "default_ai_command": self.default_ai_command,
            "setup_commands": self.setup_commands,
            "github_issues_enabled": self.github_issues_enabled,
            "base_branch": self.base_branch,
            "command_timeout": self.command_timeout,
            "setup_timeout": self.setup_timeout,
            "verbose": self.verbose,
            "debug": self.debug,
        }

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    # camelCase keys accepted from JSON config files
    CAMEL_CASE_KEYS = {
        "repositoryPath": "repository_path",
        "terminalType": "terminal_type",
        "defaultAICommand": "default_ai_command",
        "setupCommands": "setup_commands",
        "githubIssuesEnabled": "github_issues_enabled",
        "baseBranch": "base_branch",
    }

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known_fields = {
            "repository_path",
            "terminal_type",
            "frame1",
            "frame2",
            "default_ai_command",
            "setup_commands",
            "github_issues_enabled",
            "base_branch",
            "command_timeout",
            "setup_timeout",
            "verbose",
            "debug",
        }

        filtered = {}
        for key, value in config_dict.items():
            key = cls.CAMEL_CASE_KEYS.get(key, key)
            if key in known_fields:
                filtered[key] = value
        return cls(**filtered)
