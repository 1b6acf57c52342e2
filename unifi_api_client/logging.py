import logging
import json
from typing import Any, Optional


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Return a logger under the ``unifi_api_client`` hierarchy.

    Modules pass ``__name__``, which already carries the package prefix;
    callers may pass a short suffix such as ``"auth"``. Either way the logger
    inherits the level and handlers configured on ``unifi_api_client``.

    Args:
        name: Module name or suffix; None for the package logger itself.

    Returns:
        logging.Logger
    """
    if name is None:
        return logging.getLogger("unifi_api_client")
    elif name.startswith("unifi_api_client"):
        return logging.getLogger(name)
    else:
        return logging.getLogger(f"unifi_api_client.{name}")


def log_api_response(
    logger: logging.Logger,
    url: str,
    response_data: Any,
    status_code: int,
    truncate: bool = True,
    max_length: int = 500,
):
    """
    Log API response data using the provided logger.

    Args:
        logger: Logger to use
        url: The API URL that was called.
        response_data: Decoded JSON value, or the raw text when it did not decode.
        status_code: HTTP status code.
        truncate: Whether to truncate large response values. Default is True.
        max_length: Maximum length for response in the log if truncated. Default is 500.
    """
    if not logger.isEnabledFor(logging.DEBUG):
        return

    try:
        if isinstance(response_data, str):
            response_str = response_data
        else:
            response_str = json.dumps(response_data)
        if truncate and len(response_str) > max_length:
            response_str = response_str[:max_length] + "... [truncated]"

        logger.debug(
            f"API Response from {url} (Status: {status_code}):\n{response_str}"
        )
    except (TypeError, ValueError) as e:
        logger.debug(
            f"API Response from {url} (Status: {status_code}) - Error serializing: {e}"
        )
