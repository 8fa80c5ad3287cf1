"""
Policy loading from YAML files and settings.

Policy files may hold the options at the top level or under a ``policy:``
mapping. Option names are accepted in snake_case or camelCase, including the
short legacy names (``ignoreElseIf``, ``ignoreCatch``, ``requireTagPattern``,
``allowPrepStmts``, ``fixMode``).
"""

import logging
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from commentguard.config import Settings
from commentguard.models.policy import Policy
from commentguard.models.syntax import NodeKind

logger = logging.getLogger(__name__)

NON_ASCII_PATTERN = r"[^\x00-\x7F]"

LOCALE_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "ja": {"required_text_pattern": NON_ASCII_PATTERN},
}

_LEGACY_OPTION_NAMES = {
    "ignore_else_if": "ignore_else_if_chained_branch",
    "ignore_catch": "ignore_catch_finally",
    "require_tag_pattern": "required_text_pattern",
    "allow_prep_stmts": "allow_prep_statements",
    "fix_mode": "report_removable",
    "allow_blank_line_before_if": "allow_blank_line_before_keyword",
    "allow_blank_line": "allow_blank_line_before_keyword",
}

_TARGET_NAMES = {
    "if": NodeKind.CONDITIONAL,
    "for": NodeKind.FOR_LOOP,
    "while": NodeKind.WHILE_LOOP,
    "do": NodeKind.DO_WHILE_LOOP,
    "switch": NodeKind.SWITCH,
    "try": NodeKind.TRY_BLOCK,
    "ternary": NodeKind.TERNARY,
}

_LEGACY_LOCATIONS = {"before-if": "before-keyword"}

_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])([A-Z])")


def _snake_case(name: str) -> str:
    return _CAMEL_BOUNDARY_RE.sub(r"_\1", name).lower()


def normalize_options(options: Mapping[str, Any]) -> Dict[str, Any]:
    """Translate host option names and values into ``Policy`` fields."""
    normalized: Dict[str, Any] = {}
    for raw_name, value in options.items():
        name = _snake_case(raw_name)
        name = _LEGACY_OPTION_NAMES.get(name, name)

        if name == "targets" and value is not None:
            value = [_TARGET_NAMES.get(str(t), t) for t in value]
        elif name == "section_comment_locations" and value is not None:
            value = [_LEGACY_LOCATIONS.get(str(loc), loc) for loc in value]
        elif name == "report_removable" and isinstance(value, str):
            value = value.lower() in ("removable", "true", "yes")

        normalized[name] = value
    return normalized


def load_policy_options(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read policy options from a YAML file.

    Args:
        path: Path to the YAML policy file

    Returns:
        Normalized option mapping

    Raises:
        FileNotFoundError: If the file does not exist
        yaml.YAMLError: If the file is malformed
        ValueError: If the file does not contain a mapping
    """
    policy_path = Path(path)
    if not policy_path.exists():
        raise FileNotFoundError(f"Policy file not found: {policy_path}")

    try:
        with open(policy_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse policy file {policy_path}: {e}")
        raise

    if isinstance(data, dict) and isinstance(data.get("policy"), dict):
        data = data["policy"]
    if not isinstance(data, dict):
        raise ValueError(f"Policy file {policy_path} must contain a mapping")

    logger.info(f"Loaded policy options from {policy_path}")
    return normalize_options(data)


def load_policy(path: Union[str, Path]) -> Policy:
    return Policy(**load_policy_options(path))


def build_policy(
    settings: Optional[Settings] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> Policy:
    """
    Build the run policy from locale defaults, the policy file and overrides.

    Later sources win: locale defaults, then the settings' policy file, then
    the settings' threshold, then ``overrides``.

    Raises:
        pydantic.ValidationError: If the merged options are invalid
    """
    if settings is None:
        from commentguard.config import settings as app_settings
        settings = app_settings

    locale = (settings.check_locale or "en").split("-")[0].split("_")[0].lower()
    options: Dict[str, Any] = dict(LOCALE_DEFAULTS.get(locale, {}))

    if settings.policy_file:
        options.update(load_policy_options(settings.policy_file))
    if settings.similarity_threshold is not None:
        options["similarity_threshold"] = settings.similarity_threshold
    if overrides:
        options.update(normalize_options(overrides))

    policy = Policy(**options)
    logger.debug(f"Built policy for locale '{locale}': {policy.model_dump(mode='json')}")
    return policy
