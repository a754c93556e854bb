import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

from ._utils.constants import (
    DEFAULT_TIMEOUT,
    ENV_BASE_URL,
    ENV_FOLLOW_REDIRECTS,
    ENV_TIMEOUT,
    ENV_VERIFY_SSL,
)
from .models.errors import BaseUrlMissingError

_ENV_FIELDS = {
    "base_url": ENV_BASE_URL,
    "timeout": ENV_TIMEOUT,
    "verify_ssl": ENV_VERIFY_SSL,
    "follow_redirects": ENV_FOLLOW_REDIRECTS,
}


class ClientConfig(BaseModel):
    base_url: str
    timeout: float = DEFAULT_TIMEOUT
    verify_ssl: bool = True
    follow_redirects: bool = True
    # sent by the transport on every request, underneath middleware headers
    headers: Dict[str, str] = {}

    @classmethod
    def from_env(cls, **overrides: Any) -> "ClientConfig":
        """Build a configuration from ``DECLAREST_*`` environment variables.

        A ``.env`` file in the working directory is loaded first, without
        overriding variables that are already set. Keyword arguments that are
        not ``None`` take precedence over the environment.

        Raises:
            BaseUrlMissingError: If no base URL is configured anywhere.
        """
        load_dotenv(override=False)

        values: dict[str, Any] = {}
        for field, variable in _ENV_FIELDS.items():
            value: Optional[str] = os.getenv(variable)
            if value:
                values[field] = value
        values.update({k: v for k, v in overrides.items() if v is not None})

        if not values.get("base_url"):
            raise BaseUrlMissingError()
        return cls.model_validate(values)
