"""Result assemblers: turn a lookup record into one inline reply card."""

from __future__ import annotations

from .config import MAX_MESSAGE_LENGTH
from .document import Document
from .models import ASNRecord, CandidateKind, IPRecord, ReplyCandidate
from .sections import (
    add_asn_summary,
    add_company,
    add_ip_network,
    add_location,
    add_prefix,
    add_title,
)


def candidate_id(kind: CandidateKind) -> str:
    """Stable Telegram result id for a card variant."""
    return kind.value


def _more_line(count: int) -> str:
    return f"... and {count} more\n"


def _article(
    kind: CandidateKind, title: str, description: str, doc: Document
) -> ReplyCandidate:
    return ReplyCandidate(
        kind=kind,
        id=candidate_id(kind),
        title=title,
        description=description,
        document=doc,
    )


def generic_message() -> ReplyCandidate:
    """The fallback card shown for empty input and every failure."""
    return _article(
        CandidateKind.FALLBACK,
        "IPInfo Bot",
        "Look up any IP/ASN. Try it now!",
        Document().plain("You weren't meant to click me..."),
    )


def full_summary(ip: IPRecord) -> ReplyCandidate:
    doc = add_title(Document(), "Summary of", ip.address).newline()

    if ip.hostname:
        doc.plain("Hostname: ").code(ip.hostname).newline().newline()
    if ip.geolocation:
        add_location(doc, ip.geolocation)
    if ip.company:
        add_company(doc, ip.company)
    if ip.network:
        add_ip_network(doc, ip.network)
    if ip.organization:
        doc.plain("Organization: ").italic(ip.organization).newline()
    if ip.phone:
        doc.plain("Phone Number: ").code(ip.phone).newline()

    return _article(
        CandidateKind.FULL_SUMMARY,
        "Full Summary",
        f"Send a full summary of {ip.address}",
        doc,
    )


def map_pin(ip: IPRecord) -> ReplyCandidate | None:
    """A location pin, or None when the coordinates are unusable."""
    point = ip.geolocation.coordinates if ip.geolocation else None
    if point is None:
        return None
    return ReplyCandidate(
        kind=CandidateKind.MAP_PIN,
        id=candidate_id(CandidateKind.MAP_PIN),
        title="Location",
        point=point,
    )


def location_summary(ip: IPRecord) -> ReplyCandidate:
    location = ip.geolocation
    doc = Document(point=location.coordinates if location else None)
    add_title(doc, "Location of", ip.address).newline()
    if location:
        add_location(doc, location)

    return _article(
        CandidateKind.LOCATION,
        "Location Summary",
        f"Send the location data of {ip.address} as text",
        doc,
    )


def company_summary(ip: IPRecord) -> ReplyCandidate:
    doc = add_title(Document(), "Company Information of", ip.address)
    if ip.company:
        add_company(doc, ip.company)

    return _article(
        CandidateKind.COMPANY,
        "Company Summary",
        f"Send the company data of {ip.address}",
        doc,
    )


def network_summary(ip: IPRecord) -> ReplyCandidate:
    doc = add_title(Document(), "ASN Information for", ip.address)
    if ip.network:
        add_ip_network(doc, ip.network)

    return _article(
        CandidateKind.NETWORK,
        "IP ASN Summary",
        f"Send the ASN data for {ip.address}",
        doc,
    )


def asn_summary(asn: ASNRecord) -> ReplyCandidate:
    doc = add_title(Document(), "Summary of", asn.label).newline()
    add_asn_summary(doc, asn)

    return _article(
        CandidateKind.ASN_SUMMARY,
        "General Summary",
        f"Send a general summary of {asn.label}",
        doc,
    )


def asn_prefix_list(asn: ASNRecord) -> ReplyCandidate:
    """List every prefix, truncated to fit in one Telegram message."""
    doc = add_title(Document(), "ASN Prefix List of", asn.label).newline()
    prefixes = [*asn.prefixes, *asn.prefixes6]
    length = len(doc.to_plain())

    for shown, prefix in enumerate(prefixes):
        line = add_prefix(Document(), prefix)
        remaining = len(prefixes) - shown - 1
        tail = len(_more_line(remaining)) if remaining else 0
        if length + len(line.to_plain()) + tail > MAX_MESSAGE_LENGTH:
            doc.italic(_more_line(len(prefixes) - shown))
            break
        doc.extend(line)
        length += len(line.to_plain())

    return _article(
        CandidateKind.PREFIX_LIST,
        "ASN Prefix List",
        f"See the list of prefixes of {asn.label}",
        doc,
    )
