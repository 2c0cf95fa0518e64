"""
sync_reputation.config — YAML Configuration Loader
===================================================

Reads ``config.yaml`` for deployment settings (app identity, API port,
moderation policy, review text limits).  Secrets such as ``DATABASE_URL``
and ``JWT_SECRET`` stay in the environment / ``.env``.

Badge tier thresholds are deliberately absent: they are compiled into
:mod:`sync_reputation.engine.badges` and never change at runtime.

Usage::

    from sync_reputation.config import load_config

    cfg = load_config()            # reads ./config.yaml by default
    print(cfg.app_name)            # "SynC"
    print(cfg.require_moderation)  # True
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from sync_reputation.constants import REVIEW_TEXT_MIN_WORDS, REVIEW_TEXT_WORD_LIMIT


# ---------------------------------------------------------------------------
# Typed settings object
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class ReputationConfig:
    """Immutable configuration loaded from ``config.yaml``."""

    # Identity
    app_name: str

    # API
    api_port: int

    # Moderation
    require_moderation: bool = True  # False → reviews go live immediately

    # Review text rules
    review_min_words: int = REVIEW_TEXT_MIN_WORDS
    review_max_words: int = REVIEW_TEXT_WORD_LIMIT


DEFAULT_CONFIG_PATH = "config.yaml"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path | None = None) -> ReputationConfig:
    """Read *path* and return a :class:`ReputationConfig` instance.

    Parameters
    ----------
    path:
        Filesystem path to the YAML configuration file.  Defaults to the
        ``CONFIG_PATH`` env var, then ``config.yaml`` in the working
        directory.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist.
    KeyError
        If a required key is missing from the YAML file.
    ValueError
        If the word limits are inconsistent.
    """
    config_path = Path(path or os.getenv("CONFIG_PATH") or DEFAULT_CONFIG_PATH)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    reviews = raw.get("reviews") or {}
    min_words = int(reviews.get("min_words", REVIEW_TEXT_MIN_WORDS))
    max_words = int(reviews.get("max_words", REVIEW_TEXT_WORD_LIMIT))
    if min_words < 0 or max_words < min_words:
        raise ValueError(
            f"Invalid review word limits: min_words={min_words}, max_words={max_words}"
        )

    return ReputationConfig(
        app_name=raw["app_name"],
        api_port=int(raw["api_port"]),
        require_moderation=bool(raw.get("require_moderation", True)),
        review_min_words=min_words,
        review_max_words=max_words,
    )
