"""Classify an inline query as IP or ASN and build its reply cards."""

from __future__ import annotations

import logging

from .ipinfo import IPInfoClient, NotAnAddress
from .models import ASNRecord, IPRecord, Query, ReplyCandidate
from .results import (
    asn_prefix_list,
    asn_summary,
    company_summary,
    full_summary,
    generic_message,
    location_summary,
    map_pin,
    network_summary,
)

logger = logging.getLogger(__name__)


def ip_candidates(ip: IPRecord) -> list[ReplyCandidate]:
    """Cards for an IP, in display order, skipping absent sections."""
    results = [full_summary(ip)]

    if ip.geolocation:
        pin = map_pin(ip)
        if pin is not None:
            results.append(pin)
        results.append(location_summary(ip))

    if ip.network:
        results.append(network_summary(ip))

    if ip.company:
        results.append(company_summary(ip))

    return results


def asn_candidates(asn: ASNRecord) -> list[ReplyCandidate]:
    return [asn_summary(asn), asn_prefix_list(asn)]


class Dispatcher:
    """Turns one Query into the ordered list of cards to answer it with.

    Never raises: every failure ends in the single fallback card.
    """

    def __init__(self, client: IPInfoClient):
        self.client = client

    def handle(self, query: Query) -> list[ReplyCandidate]:
        text = query.text.strip()

        # An empty lookup would resolve the bot's own address.
        if not text:
            return [generic_message()]

        try:
            record = self.client.lookup_ip(text)
        except NotAnAddress:
            return self._handle_asn(query, text)
        except Exception:
            logger.exception("IP lookup failed for query %s (%r)", query.id, text)
            return [generic_message()]

        if record is None:
            logger.info("No IP data for query %s (%r)", query.id, text)
            return [generic_message()]
        return ip_candidates(record)

    def _handle_asn(self, query: Query, text: str) -> list[ReplyCandidate]:
        try:
            record = self.client.lookup_asn(text)
        except Exception:
            logger.exception("ASN lookup failed for query %s (%r)", query.id, text)
            return [generic_message()]

        if record is None:
            logger.info("No ASN data for query %s (%r)", query.id, text)
            return [generic_message()]
        return asn_candidates(record)
