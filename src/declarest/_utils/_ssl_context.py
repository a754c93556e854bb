import os
import ssl
from typing import Any, Dict

import certifi

from .._config import ClientConfig


def expand_path(path):
    """Expand environment variables and user home directory in path."""
    if not path:
        return path
    path = os.path.expandvars(path)
    path = os.path.expanduser(path)
    return path


def create_ssl_context() -> ssl.SSLContext:
    ssl_cert_file = expand_path(os.environ.get("SSL_CERT_FILE"))
    requests_ca_bundle = expand_path(os.environ.get("REQUESTS_CA_BUNDLE"))
    ssl_cert_dir = expand_path(os.environ.get("SSL_CERT_DIR"))

    return ssl.create_default_context(
        cafile=ssl_cert_file or requests_ca_bundle or certifi.where(),
        capath=ssl_cert_dir,
    )


def get_httpx_client_kwargs(config: ClientConfig) -> Dict[str, Any]:
    """Keyword arguments for ``httpx.Client``/``httpx.AsyncClient`` built from ``config``."""
    return {
        "verify": create_ssl_context() if config.verify_ssl else False,
        "timeout": config.timeout,
        "follow_redirects": config.follow_redirects,
        "headers": config.headers,
    }
