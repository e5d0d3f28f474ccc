"""ipinfo.io client for IP and ASN lookups.

Responses are parsed into the dataclasses in ``models`` and cached on disk
for ``CACHE_TTL`` seconds (see ``cache``).
"""

from __future__ import annotations

import logging
import sqlite3
import threading
import time

import requests

from . import cache
from .config import (
    CACHE_PURGE_INTERVAL,
    CACHE_TTL,
    IPINFO_BASE_URL,
    REQUEST_TIMEOUT,
    USER_AGENT,
)
from .defang import normalize_asn, normalize_ip
from .models import ASNRecord, Company, Geolocation, IPNetwork, IPRecord, Prefix

logger = logging.getLogger(__name__)


class LookupFailed(Exception):
    """The lookup service could not be reached or returned garbage."""


class NotAnAddress(ValueError):
    """The query is not an IP address; nothing was sent to the service."""


class IPInfoClient:
    def __init__(
        self,
        token: str | None = None,
        base_url: str = IPINFO_BASE_URL,
        use_cache: bool = True,
        cache_ttl: float = CACHE_TTL,
        session: requests.Session | None = None,
    ):
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.use_cache = use_cache
        self.cache_ttl = cache_ttl
        self._purge_lock = threading.Lock()
        self._last_purge = float("-inf")
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"
        if use_cache:
            cache.init_cache()

    def lookup_ip(self, text: str) -> IPRecord | None:
        """Look up an IP address (defanged notation is accepted).

        Raises NotAnAddress when *text* is not an IP address at all and
        LookupFailed on transport or parse errors. Returns None when the
        service does not know the address.
        """
        address = normalize_ip(text)
        if address is None:
            raise NotAnAddress(text)

        payload = self._fetch(f"ip:{address}", f"/{address}/json")
        if payload is None:
            return None
        try:
            return parse_ip_record(payload)
        except (KeyError, TypeError, ValueError) as exc:
            raise LookupFailed(f"Malformed IP response for {address}") from exc

    def lookup_asn(self, text: str) -> ASNRecord | None:
        """Look up an ASN such as ``AS15169``. Returns None if unknown."""
        asn = normalize_asn(text)
        if asn is None:
            return None

        payload = self._fetch(f"asn:{asn}", f"/{asn}/json")
        if payload is None:
            return None
        try:
            return parse_asn_record(payload)
        except (KeyError, TypeError, ValueError) as exc:
            raise LookupFailed(f"Malformed ASN response for {asn}") from exc

    def _fetch(self, key: str, path: str) -> dict | None:
        if self.use_cache:
            cached = self._read_cache(key)
            if cached is not None:
                logger.debug("Cache hit for %s", key)
                return cached

        url = f"{self.base_url}{path}"
        try:
            resp = self.session.get(url, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as exc:
            raise LookupFailed(f"Request to {url} failed") from exc

        if resp.status_code == 404:
            return None
        try:
            resp.raise_for_status()
            payload = resp.json()
        except (requests.RequestException, ValueError) as exc:
            raise LookupFailed(f"Bad response from {url}") from exc

        if not isinstance(payload, dict):
            raise LookupFailed(f"Unexpected payload from {url}")

        if self.use_cache:
            self._write_cache(key, payload)
        return payload

    def _read_cache(self, key: str) -> dict | None:
        try:
            return cache.get_cached(key, self.cache_ttl)
        except sqlite3.Error as exc:
            logger.warning("Cache read failed for %s: %s", key, exc)
            return None

    def _write_cache(self, key: str, payload: dict) -> None:
        try:
            cache.store(key, payload)
            self._purge_if_due()
        except sqlite3.Error as exc:
            logger.warning("Cache write failed for %s: %s", key, exc)

    def _purge_if_due(self) -> None:
        """Drop expired rows at most once per ``CACHE_PURGE_INTERVAL``."""
        with self._purge_lock:
            now = time.monotonic()
            if now - self._last_purge < CACHE_PURGE_INTERVAL:
                return
            self._last_purge = now
        removed = cache.purge_expired(self.cache_ttl)
        if removed:
            logger.debug("Purged %d expired cache entries", removed)


def _parse_geolocation(data: dict) -> Geolocation | None:
    latitude = longitude = None
    loc = data.get("loc")
    if loc and "," in loc:
        latitude, longitude = (part.strip() for part in loc.split(",", 1))

    country = data.get("country_name") or data.get("country")
    location = Geolocation(
        latitude=latitude,
        longitude=longitude,
        city=data.get("city") or None,
        region=data.get("region") or None,
        country_name=country or None,
        postal=data.get("postal") or None,
    )
    if location == Geolocation():
        return None
    return location


def _parse_company(data) -> Company | None:
    if not isinstance(data, dict) or not data.get("name"):
        return None
    return Company(
        name=data["name"], domain=data.get("domain") or "", type=data.get("type")
    )


def _parse_network(data) -> IPNetwork | None:
    if not isinstance(data, dict) or not data.get("asn") or not data.get("name"):
        return None
    return IPNetwork(
        label=data["asn"],
        name=data["name"],
        domain=data.get("domain") or None,
        route=data.get("route") or None,
        type=data.get("type") or None,
    )


def parse_ip_record(data: dict) -> IPRecord:
    """Build an IPRecord from an ipinfo.io ``/<ip>/json`` payload.

    Only ``ip`` is required. A ``company`` or ``asn`` object missing its
    name is dropped and the rest of the record is kept.
    """
    phone = data.get("phone")
    if isinstance(phone, dict):
        phone = phone.get("number")

    return IPRecord(
        address=data["ip"],
        hostname=data.get("hostname") or None,
        geolocation=_parse_geolocation(data),
        company=_parse_company(data.get("company")),
        network=_parse_network(data.get("asn")),
        organization=data.get("org") or None,
        phone=phone or None,
    )


def _parse_prefix(data: dict) -> Prefix:
    return Prefix(
        netblock=data["netblock"],
        id=data.get("id") or None,
        country=data.get("country") or None,
    )


def parse_asn_record(data: dict) -> ASNRecord:
    """Build an ASNRecord from an ipinfo.io ``/AS<n>/json`` payload."""
    return ASNRecord(
        label=data["asn"],
        name=data.get("name", ""),
        domain=data.get("domain") or None,
        country=data.get("country") or None,
        registry=data.get("registry") or None,
        allocated=data.get("allocated") or None,
        num_ips=int(data.get("num_ips") or 0),
        prefixes=[_parse_prefix(p) for p in data.get("prefixes") or []],
        prefixes6=[_parse_prefix(p) for p in data.get("prefixes6") or []],
    )
