"""
Response decoding for the DaData API.
"""

import json
import logging
from typing import Any

from .errors import ApiError, DecodeError

logger = logging.getLogger(__name__)


def decode(raw: bytes, status_code: int) -> Any:
    """
    Parse a response body and check its status.

    The API sends structured `{"detail": ...}` bodies with error statuses,
    so the status is checked after parsing. A body that does not parse
    under an error status is still reported as ApiError, without detail.

    Raises:
        DecodeError: 200 response whose body is not valid JSON
        ApiError: any non-200 response
    """
    try:
        data = json.loads(raw)
    except ValueError as e:
        if status_code != 200:
            logger.warning(f"API returned HTTP {status_code} with a non-JSON body")
            raise ApiError(status_code=status_code) from e
        raise DecodeError(f"JSON Error: {e}") from e

    if status_code != 200:
        detail = None
        if isinstance(data, dict) and data.get("detail") is not None:
            detail = str(data["detail"])
        logger.warning(f"API returned HTTP {status_code}: {detail or 'no detail'}")
        raise ApiError(status_code=status_code, detail=detail)

    return data
