"""
Decoding of controller response envelopes.

The primary API wraps every answer as ``{"meta": {"rc": "ok"|"error", "msg": ...},
"data": [...]}``. Paths under ``/v2/api/`` return the bare object on success and
``{"errorCode": ..., "message": ...}`` on failure.
"""

import json
from typing import Any, Tuple

from .logging import get_logger
from .result import ErrorKind, Result

logger = get_logger(__name__)

V2_API_PREFIX = "/v2/api/"


def decode_response(path: str, raw_body: str, boolean: bool = False) -> Tuple[Result, Any]:
    """
    Interpret a response body for ``path``.

    Args:
        path: The request path, used to recognize the ``/v2/api/`` surface.
        raw_body: Response body text.
        boolean: If True, a successful primary-API answer yields ``True``
                 instead of its ``data`` list.

    Returns:
        Tuple of the Result and the raw decoded body (the unparsed text when
        the body is not valid JSON).
    """
    try:
        response = json.loads(raw_body)
    except ValueError as e:
        error_msg = f"Failed to parse API response for {path}: {e}"
        logger.error(error_msg)
        return Result.failure(ErrorKind.DECODE_ERROR, error_msg), raw_body

    if isinstance(response, dict):
        meta = response.get("meta")
        rc = meta.get("rc") if isinstance(meta, dict) else None

        if rc == "ok":
            data = response.get("data")
            if isinstance(data, list) and not boolean:
                return Result.success(data), response
            return Result.success(True), response

        if rc == "error":
            message = meta.get("msg") or ""
            logger.debug(f"Last error message: {message}")
            return Result.failure(ErrorKind.API_ERROR, str(message)), response

    if path.startswith(V2_API_PREFIX):
        if isinstance(response, dict) and "errorCode" in response:
            message = response.get("message") or ""
            logger.debug(f"Last error message: {message}")
            return Result.failure(ErrorKind.API_ERROR, str(message)), response
        return Result.success(response), response

    logger.warning(f"Unexpected API response format for {path}")
    return Result.failure(ErrorKind.API_ERROR), response
