"""
Layout and rule catalog loader.

Loads record layouts and rule definitions from YAML files.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import yaml

from tpar_lint.core.parser.models import RecordKind

from .models import FieldSpec, RecordLayout, Rule

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


def _read_yaml(path: Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_rules_from_yaml(path: Path) -> list[Rule]:
    """
    Load rules from a YAML file.

    YAML format:
    ```yaml
    rules:
      TPR-ABN-001:
        title: "Invalid ABN"
        category: Field
        severity: error
        message: "ABN fails the modulus 89 check"
    ```
    """
    if not path.exists():
        return []

    data = _read_yaml(path)
    rules: list[Rule] = []

    for rule_id, rule_data in (data.get("rules") or {}).items():
        try:
            rules.append(Rule(id=rule_id, **rule_data))
        except Exception as e:
            # Keep loading the remaining rules
            logger.warning("Failed to load rule %s: %s", rule_id, e)

    return rules


def load_layouts_from_yaml(path: Path) -> tuple[str, list[RecordLayout]]:
    """
    Load record layouts from a YAML file.

    YAML format:
    ```yaml
    version: "FPAIVV03.0"
    layouts:
      SOFTWARE:
        label: Software
        fields:
          - {id: product_name, label: ..., start: 12, length: 80, type: alphanumeric}
    ```

    Returns:
        (layout version, layouts in file order)

    Raises:
        ValueError: If a layout names an unknown record kind or a field is invalid
    """
    if not path.exists():
        return "", []

    data = _read_yaml(path)
    version = str(data.get("version", ""))
    layouts: list[RecordLayout] = []

    for tag, layout_data in (data.get("layouts") or {}).items():
        try:
            kind = RecordKind(tag)
        except ValueError:
            raise ValueError(f"Unknown record kind in layout table: {tag}") from None

        fields = [FieldSpec(**field_data) for field_data in layout_data.get("fields", [])]
        layouts.append(
            RecordLayout(
                kind=kind,
                label=layout_data.get("label", kind.label),
                fields=fields,
            )
        )

    return version, layouts
