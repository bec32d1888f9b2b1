"""
Configuration for shellkit.

Settings live in a YAML file under a top-level ``shellkit:`` key. A missing
or unreadable file falls back to the built-in defaults.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml


DEFAULT_CONFIG_PATH = "config.yaml"


def _default_config() -> Dict[str, Any]:
    """Return default configuration."""
    return {
        "confirm": {
            "accept": ["y", "yes"],
        },
        "head": {
            "default_lines": 10,
        },
        "audit": {
            "enabled": True,
            "log_path": "data/audit_log.jsonl",
        },
    }


@dataclass
class ShellkitConfig:
    """Resolved shellkit settings."""
    accept_answers: List[str] = field(default_factory=lambda: ["y", "yes"])
    head_default_lines: int = 10
    audit_enabled: bool = True
    audit_log_path: str = "data/audit_log.jsonl"
    source_path: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source_path: Optional[str] = None) -> "ShellkitConfig":
        """Build a config from the mapping found under the ``shellkit:`` key."""
        defaults = _default_config()
        confirm = {**defaults["confirm"], **(data.get("confirm") or {})}
        head = {**defaults["head"], **(data.get("head") or {})}
        audit = {**defaults["audit"], **(data.get("audit") or {})}

        default_lines = int(head["default_lines"])
        if default_lines < 0:
            default_lines = defaults["head"]["default_lines"]

        return cls(
            accept_answers=[str(a).strip().lower() for a in confirm["accept"]],
            head_default_lines=default_lines,
            audit_enabled=bool(audit["enabled"]),
            audit_log_path=str(audit["log_path"]),
            source_path=source_path,
        )

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "ShellkitConfig":
        """
        Load configuration from a YAML file.

        Args:
            config_path: Path to the YAML file (default: config.yaml)

        Returns:
            ShellkitConfig with file values merged over the defaults
        """
        path = Path(config_path or DEFAULT_CONFIG_PATH)
        if not path.exists():
            return cls.from_dict({})

        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError):
            return cls.from_dict({})

        if not isinstance(raw, dict):
            return cls.from_dict({})

        section = raw.get("shellkit", raw)
        if not isinstance(section, dict):
            section = {}
        return cls.from_dict(section, source_path=str(path))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize back to the YAML layout."""
        return {
            "shellkit": {
                "confirm": {"accept": list(self.accept_answers)},
                "head": {"default_lines": self.head_default_lines},
                "audit": {
                    "enabled": self.audit_enabled,
                    "log_path": self.audit_log_path,
                },
            }
        }

    def save(self, config_path: Optional[str] = None) -> None:
        """Write the current settings to a YAML file."""
        path = Path(config_path or self.source_path or DEFAULT_CONFIG_PATH)
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False)
