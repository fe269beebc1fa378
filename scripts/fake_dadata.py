#!/usr/bin/env python3
"""
Fake DaData API server for local development and testing.

Serves both API hosts from one process:
- Cleansing API under /api/v2 (clean/{kind}, clean, profile/balance)
- Suggestions API under /suggestions/api/4_1/rs
  (suggest/{kind}, findById/{kind}, detectAddressByIp)

Run with: python scripts/fake_dadata.py --port 9010
Then use:
    ClientConfig(
        clean_url="http://127.0.0.1:9010/api/v2",
        suggestions_url="http://127.0.0.1:9010/suggestions/api/4_1/rs",
        token="test-token",
        secret="test-secret",
    )
"""

import argparse
import json
import logging
import re
from http.server import BaseHTTPRequestHandler, HTTPServer
from urllib.parse import parse_qs, urlparse

logger = logging.getLogger("fake-dadata")

CLEAN_PREFIX = "/api/v2"
SUGGESTIONS_PREFIX = "/suggestions/api/4_1/rs"

VALID_TOKENS = {"test-token"}
FAKE_BALANCE = 9922.3

# Fake address directory, keyed by FIAS id
FAKE_ADDRESSES = {
    "0c5b2444-70a0-4932-980c-b4dc0d3f02b5": {
        "value": "г Москва",
        "unrestricted_value": "г Москва",
        "data": {"city": "Москва", "region": "Москва", "postal_code": "101000"},
    },
    "c2deb16a-0330-4f05-821f-1d09c93331e6": {
        "value": "г Санкт-Петербург",
        "unrestricted_value": "г Санкт-Петербург",
        "data": {"city": "Санкт-Петербург", "region": "Санкт-Петербург", "postal_code": "190000"},
    },
    "5bf5ddff-6353-4a3d-80c4-6fb27f00c6c1": {
        "value": "г Новосибирск",
        "unrestricted_value": "Новосибирская обл, г Новосибирск",
        "data": {"city": "Новосибирск", "region": "Новосибирская", "postal_code": "630000"},
    },
}

# Fake organization registry, keyed by INN
FAKE_PARTIES = {
    "7707083893": {
        "value": "ПАО СБЕРБАНК",
        "data": {"inn": "7707083893", "ogrn": "1027700132195", "kpp": "773601001"},
    },
    "7736207543": {
        "value": "ООО \"ЯНДЕКС\"",
        "data": {"inn": "7736207543", "ogrn": "1027700229193", "kpp": "770401001"},
    },
}

FAKE_NAMES = [
    {"value": "Иванов Иван Иванович", "data": {"surname": "Иванов", "name": "Иван"}},
    {"value": "Иванова Анна Петровна", "data": {"surname": "Иванова", "name": "Анна"}},
    {"value": "Петров Пётр", "data": {"surname": "Петров", "name": "Пётр"}},
]

FAKE_BANKS = [
    {"value": "ПАО Сбербанк", "data": {"bic": "044525225"}},
    {"value": "АО \"Тинькофф Банк\"", "data": {"bic": "044525974"}},
]

FAKE_EMAIL_DOMAINS = ["mail.ru", "yandex.ru", "gmail.com"]

# IP -> FIAS id
FAKE_IP_LOCATIONS = {
    "46.226.227.20": "c2deb16a-0330-4f05-821f-1d09c93331e6",
    "127.0.0.1": "0c5b2444-70a0-4932-980c-b4dc0d3f02b5",
}


def _collapse(value: str) -> str:
    return re.sub(r"\s+", " ", str(value)).strip()


def clean_name(value: str) -> dict:
    result = _collapse(value).title()
    return {"source": value, "result": result or None, "qc": 0 if result else 1}


def clean_phone(value: str) -> dict:
    digits = re.sub(r"\D", "", str(value))
    if len(digits) == 10:
        digits = "7" + digits
    if len(digits) != 11:
        return {"source": value, "phone": None, "qc": 1}
    digits = "7" + digits[1:]
    phone = f"+7 {digits[1:4]} {digits[4:7]}-{digits[7:9]}-{digits[9:]}"
    return {"source": value, "phone": phone, "qc": 0}


def clean_passport(value: str) -> dict:
    digits = re.sub(r"\D", "", str(value))
    if len(digits) != 10:
        return {"source": value, "series": None, "number": None, "qc": 2}
    return {
        "source": value,
        "series": f"{digits[:2]} {digits[2:4]}",
        "number": digits[4:],
        "qc": 0,
    }


def clean_email(value: str) -> dict:
    email = _collapse(value).lower()
    if not re.fullmatch(r"[^@\s]+@[^@\s]+\.[a-z]{2,}", email):
        return {"source": value, "email": None, "qc": 1}
    return {"source": value, "email": email, "qc": 0}


def clean_birthdate(value: str) -> dict:
    match = re.fullmatch(r"(\d{1,2})[./-](\d{1,2})[./-](\d{4})", _collapse(value))
    if not match:
        return {"source": value, "birthdate": None, "qc": 1}
    day, month, year = match.groups()
    return {"source": value, "birthdate": f"{int(day):02d}.{int(month):02d}.{year}", "qc": 0}


def clean_text(value: str) -> dict:
    result = _collapse(value)
    return {"source": value, "result": result or None, "qc": 0 if result else 1}


CLEANERS = {
    "name": clean_name,
    "phone": clean_phone,
    "passport": clean_passport,
    "email": clean_email,
    "birthdate": clean_birthdate,
    "vehicle": clean_text,
    "address": clean_text,
}

STRUCTURE_CLEANERS = {
    "NAME": clean_name,
    "PHONE": clean_phone,
    "PASSPORT": clean_passport,
    "EMAIL": clean_email,
    "BIRTHDATE": clean_birthdate,
    "VEHICLE": clean_text,
    "ADDRESS": clean_text,
}


def suggest(kind: str, query: str, count: int) -> list[dict]:
    """Case-insensitive substring search over the fake directories."""
    needle = query.lower()
    if kind == "address":
        pool = list(FAKE_ADDRESSES.values())
    elif kind == "party":
        pool = list(FAKE_PARTIES.values())
    elif kind == "fio":
        pool = FAKE_NAMES
    elif kind == "bank":
        pool = FAKE_BANKS
    else:
        local = query.split("@", 1)[0]
        return [{"value": f"{local}@{domain}", "data": {}} for domain in FAKE_EMAIL_DOMAINS][
            :count
        ]
    return [item for item in pool if needle in item["value"].lower()][:count]


class FakeDaDataHandler(BaseHTTPRequestHandler):
    """HTTP handler implementing fake DaData API endpoints."""

    def log_message(self, format: str, *args) -> None:  # noqa: A002
        logger.info(args[0])

    def send_json(self, data, status: int = 200) -> None:
        """Send a JSON response."""
        payload = json.dumps(data, ensure_ascii=False).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def send_error_json(self, status: int, detail: str) -> None:
        """Send a DaData-style error response."""
        self.send_json({"detail": detail}, status=status)

    def verify_credentials(self, require_secret: bool) -> bool:
        """Check the Token authorization header and, if needed, X-Secret."""
        auth_header = self.headers.get("Authorization", "")
        if not auth_header.startswith("Token "):
            self.send_error_json(401, "Authentication credentials were not provided")
            return False
        if auth_header[6:] not in VALID_TOKENS:
            self.send_error_json(403, "Invalid API key")
            return False
        if require_secret and not self.headers.get("X-Secret"):
            self.send_error_json(403, "Invalid or missing secret key")
            return False
        return True

    def read_json(self):
        content_length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(content_length) if content_length > 0 else b""
        return json.loads(body)

    def do_POST(self) -> None:
        """Handle POST requests."""
        path = urlparse(self.path).path

        try:
            body = self.read_json()
        except (ValueError, UnicodeDecodeError):
            self.send_error_json(400, "Invalid JSON body")
            return

        if path.startswith(f"{CLEAN_PREFIX}/clean"):
            if not self.verify_credentials(require_secret=True):
                return
            if path == f"{CLEAN_PREFIX}/clean":
                self.handle_clean_structure(body)
            else:
                self.handle_clean(path.rsplit("/", 1)[-1], body)
        elif path.startswith(f"{SUGGESTIONS_PREFIX}/suggest/"):
            if not self.verify_credentials(require_secret=False):
                return
            self.handle_suggest(path.rsplit("/", 1)[-1], body)
        elif path.startswith(f"{SUGGESTIONS_PREFIX}/findById/"):
            if not self.verify_credentials(require_secret=False):
                return
            self.handle_find_by_id(path.rsplit("/", 1)[-1], body)
        else:
            self.send_error_json(404, f"Unknown endpoint: {path}")

    def do_GET(self) -> None:
        """Handle GET requests."""
        parsed = urlparse(self.path)
        query_params = parse_qs(parsed.query)

        if parsed.path == f"{CLEAN_PREFIX}/profile/balance":
            if not self.verify_credentials(require_secret=True):
                return
            self.send_json({"balance": FAKE_BALANCE})
        elif parsed.path == f"{SUGGESTIONS_PREFIX}/detectAddressByIp":
            if not self.verify_credentials(require_secret=False):
                return
            ip = query_params.get("ip", [self.client_address[0]])[0]
            self.handle_detect_address(ip)
        else:
            self.send_error_json(404, f"Unknown endpoint: {parsed.path}")

    def handle_clean(self, kind: str, body) -> None:
        cleaner = CLEANERS.get(kind)
        if cleaner is None:
            self.send_error_json(404, "Not found")
            return
        if not isinstance(body, list):
            self.send_error_json(400, "Expected a list of values")
            return
        self.send_json([cleaner(value) for value in body])

    def handle_clean_structure(self, body) -> None:
        structure = body.get("structure") if isinstance(body, dict) else None
        rows = body.get("data") if isinstance(body, dict) else None
        if not isinstance(structure, list) or not isinstance(rows, list):
            self.send_error_json(400, "Expected structure and data")
            return
        if any(kind not in STRUCTURE_CLEANERS for kind in structure):
            self.send_error_json(400, "Unknown structure type")
            return

        data = []
        for row in rows:
            if len(row) != len(structure):
                self.send_error_json(400, "Row does not match structure")
                return
            data.append(
                [STRUCTURE_CLEANERS[kind](value) for kind, value in zip(structure, row)]
            )
        self.send_json({"structure": structure, "data": data})

    def handle_suggest(self, kind: str, body: dict) -> None:
        if kind not in {"fio", "address", "party", "bank", "email"}:
            self.send_error_json(404, "Not found")
            return
        if not isinstance(body, dict):
            self.send_error_json(400, "Expected a JSON object")
            return
        query = str(body.get("query", ""))
        try:
            count = int(body.get("count", 10))
        except (TypeError, ValueError):
            self.send_error_json(400, "count must be an integer")
            return
        self.send_json({"suggestions": suggest(kind, query, count)})

    def handle_find_by_id(self, kind: str, body: dict) -> None:
        if not isinstance(body, dict):
            self.send_error_json(400, "Expected a JSON object")
            return
        query = str(body.get("query", ""))
        if kind in ("address", "delivery"):
            found = FAKE_ADDRESSES.get(query)
        elif kind == "party":
            found = FAKE_PARTIES.get(query)
        else:
            self.send_error_json(404, "Not found")
            return
        self.send_json({"suggestions": [found] if found else []})

    def handle_detect_address(self, ip: str) -> None:
        fias_id = FAKE_IP_LOCATIONS.get(ip)
        location = FAKE_ADDRESSES.get(fias_id) if fias_id else None
        self.send_json({"location": location})


def main() -> None:
    parser = argparse.ArgumentParser(description="Run fake DaData API server")
    parser.add_argument(
        "--port",
        type=int,
        default=9010,
        help="Port to listen on (default: 9010)",
    )
    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    server = HTTPServer((args.host, args.port), FakeDaDataHandler)
    print(f"Fake DaData API running at http://{args.host}:{args.port}")
    print(f"  Clean API:       http://{args.host}:{args.port}{CLEAN_PREFIX}")
    print(f"  Suggestions API: http://{args.host}:{args.port}{SUGGESTIONS_PREFIX}")
    print(f"  Tokens: {', '.join(sorted(VALID_TOKENS))}")
    print()

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("\nShutting down...")
        server.shutdown()


if __name__ == "__main__":
    main()
