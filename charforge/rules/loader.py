"""Rule table loader for YAML/JSON files.

Reads rule data from external files (or the bundled SRD 3.5 tables) and
validates it against the rule table schemas.
"""

import json
import logging
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from charforge.config import get_settings
from charforge.errors import RuleLoadError
from charforge.rules.schemas import RuleTables

logger = logging.getLogger(__name__)

DEFAULT_RULES_RESOURCE = "srd35.yaml"


def parse_rule_data(text: str, suffix: str, origin: str = "<string>") -> dict[str, Any]:
    """Parse raw rule data text.

    Args:
        text: File contents.
        suffix: File suffix selecting the format (.yaml, .yml or .json).
        origin: Name used in error messages.

    Returns:
        The decoded mapping.

    Raises:
        RuleLoadError: If the format is unsupported or the text cannot be parsed.
    """
    suffix = suffix.lower()
    try:
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        elif suffix == ".json":
            data = json.loads(text)
        else:
            raise RuleLoadError(
                f"Unsupported file format: {suffix}. Use .yaml, .yml, or .json"
            )
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise RuleLoadError(f"Failed to parse {origin}: {e}") from e

    if not isinstance(data, dict):
        raise RuleLoadError(f"Rule data in {origin} must be a mapping at the top level")
    return data


def build_rule_tables(data: dict[str, Any], origin: str = "<data>") -> RuleTables:
    """Validate decoded rule data.

    Raises:
        RuleLoadError: If the data does not match the rule table schemas.
    """
    try:
        tables = RuleTables.model_validate(data)
    except ValidationError as e:
        raise RuleLoadError(f"Invalid rule tables in {origin}: {e}") from e

    logger.debug(
        f"Loaded rule tables from {origin}: {len(tables.races)} races, "
        f"{len(tables.classes)} classes, {len(tables.feats)} feats, "
        f"{len(tables.items)} items, {len(tables.skills)} skills"
    )
    return tables


def load_rule_tables(file_path: Path | str) -> RuleTables:
    """Load rule tables from a YAML or JSON file.

    Args:
        file_path: Path to YAML or JSON file.

    Returns:
        Validated RuleTables.

    Raises:
        RuleLoadError: If file cannot be parsed or data is invalid.
        FileNotFoundError: If file does not exist.
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Rules file not found: {file_path}")

    text = file_path.read_text(encoding="utf-8")
    data = parse_rule_data(text, file_path.suffix, origin=str(file_path))
    return build_rule_tables(data, origin=str(file_path))


@lru_cache
def load_default_tables() -> RuleTables:
    """Load the configured rule tables, cached.

    Uses ``settings.rules_file`` when set, otherwise the bundled SRD 3.5
    tables.
    """
    rules_file = get_settings().rules_file
    if rules_file:
        return load_rule_tables(rules_file)

    resource = resources.files("charforge.rules") / "data" / DEFAULT_RULES_RESOURCE
    text = resource.read_text(encoding="utf-8")
    data = parse_rule_data(text, ".yaml", origin=DEFAULT_RULES_RESOURCE)
    return build_rule_tables(data, origin=DEFAULT_RULES_RESOURCE)
