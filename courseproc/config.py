"""Build configuration for the course processor core.

All settings can be overridden via environment variables or by passing
values directly to ``load_config``.
"""

import os
from dataclasses import dataclass
from typing import Optional

REFERENCE_STYLES = ("ieee", "none")


@dataclass
class BuildConfig:
    """Settings for one course build."""

    filters: str = ""
    reference_style: str = "ieee"
    redefines_fatal: bool = False
    collect_excluded: bool = True
    template_dir: Optional[str] = None
    show_progress: bool = True

    def __post_init__(self):
        """Validate reference style."""
        if self.reference_style not in REFERENCE_STYLES:
            raise ValueError(
                f"Unknown reference style '{self.reference_style}', expected one of {REFERENCE_STYLES}"
            )


def _env_flag(name: str) -> Optional[bool]:
    value = os.getenv(name)
    if value is None:
        return None
    return value.lower() in ("1", "true", "yes")


def load_config(**overrides) -> BuildConfig:
    """Build a BuildConfig with env-var and keyword overrides.

    Resolution order (later wins):
      1. Dataclass defaults
      2. Environment variables (``COURSEPROC_FILTERS``, etc.)
      3. Explicit keyword arguments

    Supported env vars:
      - COURSEPROC_FILTERS  (comma-separated filter names)
      - COURSEPROC_REFERENCE_STYLE  ("ieee"/"none")
      - COURSEPROC_REDEFINES_FATAL  ("true"/"false")
      - COURSEPROC_COLLECT_EXCLUDED  ("true"/"false")
      - COURSEPROC_TEMPLATE_DIR
      - COURSEPROC_SHOW_PROGRESS  ("true"/"false")
    """
    cfg = BuildConfig()

    # Env-var layer
    filters = os.getenv("COURSEPROC_FILTERS")
    if filters:
        cfg.filters = filters

    style = os.getenv("COURSEPROC_REFERENCE_STYLE")
    if style:
        cfg.reference_style = style.lower()

    redefines_fatal = _env_flag("COURSEPROC_REDEFINES_FATAL")
    if redefines_fatal is not None:
        cfg.redefines_fatal = redefines_fatal

    collect_excluded = _env_flag("COURSEPROC_COLLECT_EXCLUDED")
    if collect_excluded is not None:
        cfg.collect_excluded = collect_excluded

    template_dir = os.getenv("COURSEPROC_TEMPLATE_DIR")
    if template_dir:
        cfg.template_dir = template_dir

    show_progress = _env_flag("COURSEPROC_SHOW_PROGRESS")
    if show_progress is not None:
        cfg.show_progress = show_progress

    # Explicit overrides layer
    for key, value in overrides.items():
        if hasattr(cfg, key):
            setattr(cfg, key, value)
        else:
            raise TypeError(f"Unknown config key: {key!r}")

    # Re-run validation after overrides
    cfg.__post_init__()
    return cfg
