"""Configuration loading and CLI overrides for runtime tunables.

Precedence: CLI arguments, then the config file, then Constants defaults.
Config problems are logged and never break the CLI.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)


def find_config(repo_root: str) -> Optional[str]:
    """Return the first default config file present in ``repo_root``, if any."""
    for name in Constants.CONFIG_FILES:
        path = os.path.join(repo_root, name)
        if os.path.isfile(path):
            return path
    return None


def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Load configuration from a YAML or JSON file.

    Args:
        config_path: Path to YAML/YML/JSON config file.

    Returns:
        Configuration dict (empty when missing or unreadable).
    """
    if not config_path:
        return {}

    if not os.path.isfile(config_path):
        logger.warning("Config file not found: %s", config_path)
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as fh:
            if config_path.lower().endswith(".json"):
                data = json.load(fh)
            else:
                data = yaml.safe_load(fh)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error("Failed to load config %s: %s", config_path, e)
        return {}

    if not isinstance(data, dict):
        if data is not None:
            logger.warning("Ignoring config %s: top level must be a mapping", config_path)
        return {}
    return data


def apply_config(cfg: Dict[str, Any]) -> None:
    """Write recognised config keys into Constants."""
    if not cfg:
        return

    if isinstance(cfg.get("tag_prefix"), str):
        Constants.TAG_PREFIX = cfg["tag_prefix"]
    if isinstance(cfg.get("remote"), str) and cfg["remote"].strip():
        Constants.REMOTE_NAME = cfg["remote"].strip()

    source = cfg.get("remote_source")
    if isinstance(source, str):
        if source.lower() in Constants.SUPPORTED_REMOTE_SOURCES:
            Constants.REMOTE_SOURCE = source.lower()
        else:
            logger.warning("Ignoring unsupported remote_source %r in config", source)

    branches = cfg.get("release_branches")
    if isinstance(branches, str):
        branches = [branches]
    if isinstance(branches, list) and branches:
        Constants.RELEASE_BRANCHES = [str(b) for b in branches]

    if isinstance(cfg.get("github_api_base"), str):
        Constants.GITHUB_API_BASE = cfg["github_api_base"]
    if isinstance(cfg.get("gitlab_api_base"), str):
        Constants.GITLAB_API_BASE = cfg["gitlab_api_base"]

    classifier = cfg.get("classifier")
    if isinstance(classifier, dict):
        Constants.CLASSIFIER_PATTERNS = {
            str(k).lower(): v for k, v in classifier.items() if isinstance(v, (str, list))
        }
    elif classifier is not None:
        logger.warning("Ignoring classifier config: expected a mapping of category to patterns")


def apply_cli_overrides(args) -> None:
    """Apply CLI arguments on top of the loaded configuration."""
    if getattr(args, "REMOTE", None):
        Constants.REMOTE_NAME = args.REMOTE
    if getattr(args, "REMOTE_SOURCE", None):
        Constants.REMOTE_SOURCE = args.REMOTE_SOURCE
    if getattr(args, "TAG_PREFIX", None) is not None:
        Constants.TAG_PREFIX = args.TAG_PREFIX
    if getattr(args, "GH_TOKEN", None):
        Constants.GITHUB_TOKEN = args.GH_TOKEN
    if getattr(args, "GITLAB_TOKEN", None):
        Constants.GITLAB_TOKEN = args.GITLAB_TOKEN
