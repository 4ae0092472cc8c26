"""
Rule Registry.

Central registry for record layouts and the rule catalog.
"""

from __future__ import annotations

import logging
from pathlib import Path

from tpar_lint.core.parser.models import RecordKind

from .loader import load_layouts_from_yaml, load_rules_from_yaml
from .models import RecordLayout, Rule

logger = logging.getLogger(__name__)

# Package data directory holding layouts.yaml and catalog.yaml
DATA_DIR = Path(__file__).parent.parent.parent / "rules"


class RuleRegistry:
    """
    Central registry for layouts and rules.

    Loads from:
    1. Built-in YAML files shipped with the package
    2. Custom directories (tests, alternative catalogs)
    """

    def __init__(self) -> None:
        self.rules: dict[str, Rule] = {}
        self.layouts: dict[RecordKind, RecordLayout] = {}
        self.layout_version = ""
        self._loaded = False

    def register_rule(self, rule: Rule) -> None:
        """Register a rule."""
        self.rules[rule.id] = rule

    def register_layout(self, layout: RecordLayout) -> None:
        """Register a record layout."""
        self.layouts[layout.kind] = layout

    def get_rule(self, rule_id: str) -> Rule | None:
        """Get a rule by ID."""
        return self.rules.get(rule_id)

    def get_layout(self, kind: RecordKind) -> RecordLayout | None:
        """Get the layout for a record kind."""
        return self.layouts.get(kind)

    def require_rule(self, rule_id: str) -> Rule:
        """Get a rule by ID, failing loudly if the catalog lacks it."""
        rule = self.rules.get(rule_id)
        if rule is None:
            raise KeyError(f"Rule not in catalog: {rule_id}")
        return rule

    def require_layout(self, kind: RecordKind) -> RecordLayout:
        """Get a layout, failing loudly if the table lacks it."""
        layout = self.layouts.get(kind)
        if layout is None:
            raise KeyError(f"No layout for record kind: {kind.tag}")
        return layout

    def load_builtin(self) -> None:
        """Load built-in layouts and rules from package."""
        if self._loaded:
            return

        self.load_from_directory(DATA_DIR)

        missing = [kind.tag for kind in RecordKind if kind not in self.layouts]
        if missing:
            logger.warning("Layout table has no entry for: %s", ", ".join(missing))

        self._loaded = True

    def load_from_directory(self, directory: Path) -> None:
        """Load layouts.yaml and catalog.yaml from a directory."""
        version, layouts = load_layouts_from_yaml(directory / "layouts.yaml")
        if version:
            self.layout_version = version
        for layout in layouts:
            self.register_layout(layout)

        for rule in load_rules_from_yaml(directory / "catalog.yaml"):
            self.register_rule(rule)

        logger.debug(
            "Loaded %d layouts and %d rules from %s",
            len(layouts),
            len(self.rules),
            directory,
        )


# Global registry instance
_registry: RuleRegistry | None = None


def get_registry() -> RuleRegistry:
    """Get the global rule registry."""
    global _registry
    if _registry is None:
        _registry = RuleRegistry()
        _registry.load_builtin()
    return _registry


def reset_registry() -> None:
    """Reset the global registry (for testing)."""
    global _registry
    _registry = None
