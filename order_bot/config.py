# Role: Central configuration module. Loads .env into environment variables and computes runtime flags (DEBUG),
# plus the NLU credentials that decide whether intent extraction is available at all.

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEBUG: bool = False

_DEFAULT_NLU_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class NluSettings:
    app_id: Optional[str] = None
    api_key: Optional[str] = None
    api_host: Optional[str] = None
    timeout_seconds: float = _DEFAULT_NLU_TIMEOUT_SECONDS

    @property
    def is_configured(self) -> bool:
        # Key line: all three credentials are required; a partial set counts as "not configured".
        return bool(self.app_id and self.api_key and self.api_host)


def load_env() -> None:
    """
    Load .env into os.environ, then recompute DEBUG.
    This makes DEBUG correct even if load_env() is called after import.
    """
    global DEBUG
    load_dotenv()
    DEBUG = os.getenv("DEBUG", "0").lower() in {"1", "true", "yes"}


def nlu_settings() -> NluSettings:
    timeout_raw = os.getenv("NLU_TIMEOUT_SECONDS", "").strip()
    try:
        timeout = float(timeout_raw) if timeout_raw else _DEFAULT_NLU_TIMEOUT_SECONDS
    except ValueError:
        timeout = _DEFAULT_NLU_TIMEOUT_SECONDS

    return NluSettings(
        app_id=(os.getenv("NLU_APP_ID") or "").strip() or None,
        api_key=(os.getenv("NLU_API_KEY") or "").strip() or None,
        api_host=(os.getenv("NLU_API_HOST") or "").strip() or None,
        timeout_seconds=timeout if timeout > 0 else _DEFAULT_NLU_TIMEOUT_SECONDS,
    )


def date_prompt_max_attempts() -> int:
    # 0 means "no cap": the date resolver keeps asking until it gets a full date.
    try:
        value = int(os.getenv("DATE_PROMPT_MAX_ATTEMPTS", "0"))
    except ValueError:
        return 0
    return max(value, 0)
