"""
dadata-client: Python SDK for the DaData cleansing and suggestions API.

Normalizes names, phones, addresses and other personal data, and provides
autocomplete suggestions, lookup by ID and IP geolocation.
"""

__version__ = "1.0.0"

from .client import DaDataClient  # noqa: E402
from .config import ClientConfig  # noqa: E402
from .errors import ApiError, DaDataError, DecodeError, TransportError  # noqa: E402
from .mapper import FixedField, Projection, passport_number  # noqa: E402
from .models import CleanResult  # noqa: E402

__all__ = [
    "ApiError",
    "ClientConfig",
    "CleanResult",
    "DaDataClient",
    "DaDataError",
    "DecodeError",
    "FixedField",
    "Projection",
    "TransportError",
    "passport_number",
]
