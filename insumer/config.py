# =============================================================================
# insumer/config.py  —  Deployment Configuration
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Reads the single configuration value this server has (INSUMER_API_KEY)
#   and freezes it into a Settings object.  The client receives Settings at
#   construction time; nothing else reads the environment.
#
# MISSING KEY POLICY:
#   Two behaviors exist and both are legitimate deployments:
#     - warn (default):  start anyway, log a warning, and let each
#                        authenticated tool call fail with a hint.
#     - fail-fast:       refuse to start (ConfigurationError).
#   The free tools (JWKS, compliance templates, code validation) keep working
#   in warn mode, which is why it is the default.
#
# .env FILES:
#   main.py calls load_dotenv() before load_settings(), so a local .env file
#   with INSUMER_API_KEY=... works the same as an exported variable.
# =============================================================================

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

API_BASE = "https://api.insumermodel.com/v1"
API_KEY_ENV = "INSUMER_API_KEY"
SIGNUP_URL = "https://insumermodel.com/developers/"

MISSING_KEY_MESSAGE = (
    f"{API_KEY_ENV} environment variable is not set. "
    f"Get a free key at {SIGNUP_URL}"
)


class ConfigurationError(RuntimeError):
    """Raised when the deployment requires an API key and none is set."""


@dataclass(frozen=True)
class Settings:
    """Immutable configuration threaded into InsumerClient."""

    api_key: str = ""
    base_url: str = API_BASE

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    def __repr__(self) -> str:
        # Never print the key itself.
        masked = "***" if self.api_key else "<unset>"
        return f"Settings(api_key={masked}, base_url={self.base_url!r})"


def load_settings(require_api_key: bool = False) -> Settings:
    """Build Settings from the process environment.

    Args:
        require_api_key: When True, a missing key raises ConfigurationError
            (fail-fast).  When False, a warning is logged and authenticated
            tools report the problem per call.

    Returns:
        A frozen Settings instance.
    """
    api_key = os.environ.get(API_KEY_ENV, "").strip()

    if not api_key:
        if require_api_key:
            raise ConfigurationError(MISSING_KEY_MESSAGE)
        logger.warning(
            "%s not set. Tools requiring authentication will return errors.",
            API_KEY_ENV,
        )

    return Settings(api_key=api_key)
