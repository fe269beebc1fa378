"""
DaData API client.

Wraps the cleansing API (normalization of names, phones, addresses and
other structured fields) and the suggestions API (autocomplete, lookup by
ID, IP geolocation).

API Documentation: https://dadata.ru/api/
"""

import logging
from numbers import Number
from typing import Any

import httpx

from .config import ClientConfig
from .decoder import decode
from .errors import ApiError
from .mapper import (
    FixedField,
    Projection,
    Selector,
    map_results,
    passport_number,
    to_records,
)
from .models import CleanResult
from .transport import Credentials, Transport

logger = logging.getLogger(__name__)

SUGGEST_KINDS = frozenset({"fio", "address", "party", "bank", "email"})
FIND_BY_ID_KINDS = frozenset({"address", "delivery", "party"})


class DaDataClient:
    """
    Client for the DaData cleansing and suggestions APIs.

    Holds one HTTP connection pool for its lifetime; use it as a context
    manager or call close() when done.
    """

    def __init__(
        self,
        token: str | None = None,
        secret: str | None = None,
        *,
        config: ClientConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize the DaData client.

        Args:
            token: API token (falls back to config, then DADATA_TOKEN)
            secret: API secret (falls back to config, then DADATA_SECRET)
            config: Base URLs, timeouts and credential sources
            transport: Optional httpx transport, mainly for tests
        """
        self.config = config or ClientConfig()
        self.credentials = Credentials(
            token=token or self.config.get_token() or "",
            secret=secret or self.config.get_secret(),
        )
        self.clean_url = self.config.clean_url.rstrip("/")
        self.suggestions_url = self.config.suggestions_url.rstrip("/")
        self._transport = Transport(
            self.credentials,
            connect_timeout=self.config.connect_timeout,
            read_timeout=self.config.read_timeout,
            transport=transport,
        )

    def close(self) -> None:
        """Release the underlying HTTP connection."""
        self._transport.close()

    def __enter__(self) -> "DaDataClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(
        self,
        url: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        status_code, raw = self._transport.send(url, body, params=params)
        return decode(raw, status_code)

    # -------------------------------------------------------------------------
    # Cleansing
    # -------------------------------------------------------------------------

    def clean_records(self, kind: str, data: Any, selector: Selector) -> CleanResult:
        """
        Clean one value, a list of values, or a mapping of key -> value.

        Args:
            kind: Cleansing type (name, phone, address, passport, ...)
            data: Single value, list, or mapping
            selector: FixedField or Projection applied to each record

        Returns:
            CleanResult with the selected value(s) and the raw records
        """
        if not isinstance(selector, (FixedField, Projection)):
            raise ValueError(
                f"selector must be FixedField or Projection, got {type(selector).__name__}"
            )

        keys, values, single = to_records(data)
        logger.debug(f"Cleaning {len(values)} {kind} record(s)")

        records = self._request(f"{self.clean_url}/clean/{kind}", values)
        value = map_results(
            keys,
            records,
            selector,
            single,
            sequence=isinstance(data, (list, tuple)),
        )
        return CleanResult(kind=kind, value=value, records=records)

    def clean(self, kind: str, data: Any, selector: Selector) -> Any:
        """
        Clean data and return only the selected value(s).

        A single input returns a single value; a mapping returns a mapping
        with the same keys; a list returns a list. Records where the
        selector finds nothing yield False.
        """
        return self.clean_records(kind, data, selector).value

    def clean_name(self, data: Any, selector: Selector = FixedField("result")) -> Any:
        return self.clean("name", data, selector)

    def clean_phone(self, data: Any, selector: Selector = FixedField("phone")) -> Any:
        return self.clean("phone", data, selector)

    def clean_passport(self, data: Any, selector: Selector | None = None) -> Any:
        """Clean passport numbers. By default returns "<series> <number>"."""
        return self.clean("passport", data, selector or passport_number)

    def clean_email(self, data: Any, selector: Selector = FixedField("email")) -> Any:
        return self.clean("email", data, selector)

    def clean_birthdate(
        self, data: Any, selector: Selector = FixedField("birthdate")
    ) -> Any:
        return self.clean("birthdate", data, selector)

    def clean_vehicle(self, data: Any, selector: Selector = FixedField("result")) -> Any:
        return self.clean("vehicle", data, selector)

    def clean_address(self, data: Any, selector: Selector = FixedField("result")) -> Any:
        return self.clean("address", data, selector)

    def clean_structure(self, structure: list[str], data: list[list[Any]]) -> Any:
        """
        Clean composite records described by a structure.

        Args:
            structure: Field types, e.g. ["NAME", "PHONE", "ADDRESS"]
            data: Rows of values matching the structure

        Returns:
            The API response as-is
        """
        return self._request(
            f"{self.clean_url}/clean",
            {"structure": structure, "data": data},
        )

    # -------------------------------------------------------------------------
    # Suggestions
    # -------------------------------------------------------------------------

    def _suggestions(self, path: str, query: str, options: dict[str, Any]) -> list:
        body = {**options, "query": query}
        response = self._request(f"{self.suggestions_url}/{path}", body)
        if not isinstance(response, dict) or not isinstance(
            response.get("suggestions"), list
        ):
            raise ApiError("Unexpected answer", status_code=200)
        return response["suggestions"]

    def suggest(self, kind: str, query: str, **options: Any) -> list:
        """
        Get autocomplete suggestions.

        Args:
            kind: One of fio, address, party, bank, email
            query: Free-text user input
            **options: Endpoint-specific options (count, locations, ...),
                passed through as-is

        Returns:
            List of suggestion objects
        """
        if kind not in SUGGEST_KINDS:
            raise ValueError(f"Unknown suggestion type: {kind}")
        return self._suggestions(f"suggest/{kind}", query, options)

    def suggest_fio(self, query: str, **options: Any) -> list:
        return self.suggest("fio", query, **options)

    def suggest_address(self, query: str, **options: Any) -> list:
        return self.suggest("address", query, **options)

    def suggest_party(self, query: str, **options: Any) -> list:
        return self.suggest("party", query, **options)

    def suggest_bank(self, query: str, **options: Any) -> list:
        return self.suggest("bank", query, **options)

    def suggest_email(self, query: str, **options: Any) -> list:
        return self.suggest("email", query, **options)

    def find_by_id(self, kind: str, query: str, **options: Any) -> list:
        """
        Look up an entity by identifier (FIAS/KLADR code, INN, OGRN, ...).

        Args:
            kind: One of address, delivery, party
            query: Identifier to look up
            **options: Endpoint-specific options, passed through as-is
        """
        if kind not in FIND_BY_ID_KINDS:
            raise ValueError(f"Unknown lookup type: {kind}")
        return self._suggestions(f"findById/{kind}", query, options)

    def find_address(self, query: str, **options: Any) -> list:
        return self.find_by_id("address", query, **options)

    def find_delivery(self, query: str, **options: Any) -> list:
        return self.find_by_id("delivery", query, **options)

    def find_party(self, query: str, **options: Any) -> list:
        return self.find_by_id("party", query, **options)

    def detect_address_by_ip(self, ip: str | None = None) -> dict[str, Any] | None:
        """
        Detect city by IP address.

        Args:
            ip: IPv4/IPv6 address; None means the caller's own address

        Returns:
            Location suggestion, or None if the API could not resolve it
        """
        params = {"ip": ip} if ip else None
        response = self._request(
            f"{self.suggestions_url}/detectAddressByIp", params=params
        )
        if not isinstance(response, dict) or "location" not in response:
            raise ApiError("Unexpected answer", status_code=200)
        return response["location"]

    def balance(self) -> float:
        """Get the current account balance."""
        response = self._request(f"{self.clean_url}/profile/balance")
        value = response.get("balance") if isinstance(response, dict) else None
        if not isinstance(value, Number) or isinstance(value, bool):
            raise ApiError("Unexpected answer", status_code=200)
        return float(value)
