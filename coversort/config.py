"""Rule store: the ordered domain -> folder rules, persisted as JSON.

File layout:

    {"mappings": [{"domain": "medium.com", "folder": "Clippings/Images"}]}

Loaded once at start, saved after every edit.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .models import Rule

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".coversort"
CONFIG_FILE_NAME = "config.json"

DEFAULT_SETTINGS: dict[str, Any] = {
    "mappings": [],
}


def default_config_path(vault_path: Path) -> Path:
    """Config file location for a vault."""
    return vault_path / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def _coerce_rule(raw: Any) -> Rule | None:
    if not isinstance(raw, dict):
        return None
    domain = raw.get("domain")
    folder = raw.get("folder", "")
    if not isinstance(domain, str):
        return None
    if not isinstance(folder, str):
        folder = ""
    return Rule(domain=domain.strip(), folder=folder.strip())


def parse_rules(data: dict[str, Any]) -> list[Rule]:
    """Read the rule list out of a decoded settings document."""
    rules: list[Rule] = []
    for raw in data.get("mappings") or []:
        rule = _coerce_rule(raw)
        if rule is None:
            logger.warning("Skipping malformed rule entry: %r", raw)
            continue
        rules.append(rule)
    return rules


class RuleStore:
    """Holds the rule list in memory and persists it to a JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._settings: dict[str, Any] = dict(DEFAULT_SETTINGS)
        self._rules: list[Rule] = []

    @classmethod
    def for_vault(cls, vault_path: Path) -> RuleStore:
        store = cls(default_config_path(vault_path))
        store.load()
        return store

    def load(self) -> list[Rule]:
        """(Re)load rules from disk; a missing file gives the defaults."""
        settings = dict(DEFAULT_SETTINGS)
        if self.path.exists():
            try:
                data = json.loads(self.path.read_text(encoding="utf-8"))
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid config file {self.path}: {e}") from e
            if not isinstance(data, dict):
                raise ValueError(f"Invalid config file {self.path}: expected a JSON object")
            settings.update(data)

        self._settings = settings
        self._rules = parse_rules(settings)
        logger.debug("Loaded %d rules from %s", len(self._rules), self.path)
        return self.get()

    def get(self) -> list[Rule]:
        """Current rules, in priority order. The returned list is a copy."""
        return [Rule(domain=r.domain, folder=r.folder) for r in self._rules]

    def replace(self, rules: list[Rule]) -> None:
        self._rules = [Rule(domain=r.domain, folder=r.folder) for r in rules]

    def save(self) -> None:
        """Write the rules (and any other settings keys) back to disk."""
        settings = dict(self._settings)
        settings["mappings"] = [r.to_dict() for r in self._rules]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(settings, indent=2) + "\n", encoding="utf-8")
        self._settings = settings

    # -- editing, each edit is persisted immediately --

    def add(self, domain: str = "", folder: str = "") -> Rule:
        rule = Rule(domain=domain.strip(), folder=folder.strip())
        self._rules.append(rule)
        self.save()
        return rule

    def remove(self, index: int) -> Rule:
        self._check_index(index)
        rule = self._rules.pop(index)
        self.save()
        return rule

    def update(self, index: int, *, domain: str | None = None, folder: str | None = None) -> Rule:
        self._check_index(index)
        rule = self._rules[index]
        if domain is not None:
            rule.domain = domain.strip()
        if folder is not None:
            rule.folder = folder.strip()
        self.save()
        return Rule(domain=rule.domain, folder=rule.folder)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._rules):
            raise IndexError(f"No rule at index {index} ({len(self._rules)} rules)")
