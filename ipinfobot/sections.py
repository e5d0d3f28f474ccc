"""Section builders: append one block of lookup data to a Document.

Each builder renders only the fields that are present and leaves the record
untouched.
"""

from __future__ import annotations

from .document import Document
from .models import ASNRecord, Company, Geolocation, IPNetwork, Prefix


def add_title(doc: Document, heading: str, subject: str) -> Document:
    """``-- <heading> <subject> --`` followed by a newline."""
    return doc.bold(f"-- {heading} ").italic(subject).bold(" --").newline()


def add_location(doc: Document, location: Geolocation) -> Document:
    doc.bold("Location Info: ").newline()

    if location.longitude is not None:
        doc.plain("- Longitude: ").code(location.longitude).newline()
    if location.latitude is not None:
        doc.plain("- Latitude: ").code(location.latitude).newline()

    if location.has_area:
        doc.plain("- General Area: ")
        if location.city:
            doc.italic(location.city)
            if location.region or location.country_name:
                doc.italic(", ")
        if location.region:
            doc.italic(location.region)
            if location.country_name:
                doc.space()
        if location.country_name:
            doc.italic(location.country_name)
        doc.newline()

    if location.postal:
        doc.plain("- Postal Code: ").italic(location.postal).newline()

    return doc.newline()


def add_company(doc: Document, company: Company) -> Document:
    doc.plain("Company: ").italic(company.name).italic(", ").italic(company.domain)
    doc.newline()

    if company.type:
        doc.plain("Company Type: ").italic(company.type.upper()).newline()

    return doc


def add_ip_network(doc: Document, network: IPNetwork) -> Document:
    doc.bold("ASN Info:").newline()
    doc.plain("- Label: ").code(network.label).newline()
    doc.plain("- Name: ").italic(network.name)
    if network.domain:
        doc.plain(", ").code(network.domain)
    doc.newline()

    if network.route:
        doc.plain("- Route: ").code(network.route).newline()
    if network.type:
        doc.plain("- Type: ").italic(network.type.upper()).newline()

    return doc


def add_asn_summary(doc: Document, asn: ASNRecord) -> Document:
    doc.plain("Label: ").code(asn.label).newline()
    doc.plain("Name: ").italic(asn.name).newline()

    if asn.domain:
        doc.plain("Domain: ").code(asn.domain).newline()
    if asn.country:
        doc.plain("Country: ").code(asn.country).newline()
    if asn.registry:
        doc.plain("Registry: ").italic(asn.registry).newline()
    if asn.allocated:
        doc.plain("Allocation Date: ").italic(asn.allocated).newline()

    doc.plain("Number of IPs: ").code(str(asn.num_ips)).newline()
    doc.plain("IPv4 prefixes: ").code(str(len(asn.prefixes))).newline()
    doc.plain("IPv6 prefixes: ").code(str(len(asn.prefixes6))).newline()
    return doc


def add_prefix(doc: Document, prefix: Prefix) -> Document:
    """One line per prefix: ``<netblock> -- <id>, <netblock>, <country>``."""
    doc.code(prefix.netblock)

    if prefix.id:
        doc.plain(" -- ").code(prefix.id).plain(", ").italic(prefix.netblock)
        if prefix.country:
            doc.plain(", ").italic(prefix.country)

    return doc.newline()
