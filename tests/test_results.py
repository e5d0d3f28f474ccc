"""Tests for the result assemblers."""

import pytest

from ipinfobot.document import Document, Style
from ipinfobot.models import (
    ASNRecord,
    CandidateKind,
    GeoPoint,
    Geolocation,
    IPRecord,
    Prefix,
    ReplyCandidate,
)
from ipinfobot.results import (
    asn_prefix_list,
    asn_summary,
    candidate_id,
    company_summary,
    full_summary,
    generic_message,
    location_summary,
    map_pin,
    network_summary,
)

SECTION_HEADERS = ("Location Info:", "Company:", "ASN Info:")


class TestGenericMessage:
    def test_fallback_card(self):
        """The fallback card has id -1 and the fixed teaser text."""
        card = generic_message()
        assert card.id == "-1"
        assert card.kind is CandidateKind.FALLBACK
        assert card.title == "IPInfo Bot"
        assert card.document.to_plain() == "You weren't meant to click me..."


class TestCandidateIds:
    def test_ids_unique_per_kind(self):
        """Every card kind maps to its own result id."""
        ids = [candidate_id(kind) for kind in CandidateKind]
        assert len(ids) == len(set(ids))

    def test_asn_summary_does_not_reuse_full_summary_id(self, asn_record, full_ip):
        """The ASN summary and the IP full summary never share an id."""
        assert asn_summary(asn_record).id != full_summary(full_ip).id


class TestFullSummary:
    def test_bare_record_has_no_sections(self, bare_ip):
        """A record with only an address renders just the title."""
        card = full_summary(bare_ip)
        text = card.document.to_plain()
        assert text == "-- Summary of 10.0.0.1 --\n\n"
        for header in SECTION_HEADERS:
            assert header not in text

    def test_hostname_is_code(self):
        """The hostname is rendered as code."""
        card = full_summary(IPRecord(address="8.8.8.8", hostname="dns.google"))
        spans = card.document.spans
        idx = spans.index((Style.PLAIN, "Hostname: "))
        assert spans[idx + 1] == (Style.CODE, "dns.google")

    def test_full_record(self, full_ip):
        """Every section and trailing line is present for a full record."""
        card = full_summary(full_ip)
        text = card.document.to_plain()
        assert card.kind is CandidateKind.FULL_SUMMARY
        assert card.title == "Full Summary"
        assert card.description == "Send a full summary of 8.8.8.8"
        for header in SECTION_HEADERS:
            assert header in text
        assert "Organization: AS15169 Google LLC\n" in text
        assert "Phone Number: +1-650-253-0000\n" in text

    def test_section_order(self, full_ip):
        """Sections appear in a fixed order."""
        text = full_summary(full_ip).document.to_plain()
        positions = [text.index(h) for h in ("Hostname:", *SECTION_HEADERS, "Organization:")]
        assert positions == sorted(positions)


class TestMapPin:
    def test_coordinates(self, full_ip):
        """The map pin carries numeric coordinates and no document."""
        card = map_pin(full_ip)
        assert card.kind is CandidateKind.MAP_PIN
        assert card.point == GeoPoint(latitude=37.4056, longitude=-122.0775)
        assert card.document is None

    def test_none_without_geolocation(self, bare_ip):
        """No geolocation means no map pin."""
        assert map_pin(bare_ip) is None

    def test_none_with_unparseable_coordinates(self):
        """Coordinates that do not parse as numbers give no map pin."""
        ip = IPRecord(address="1.2.3.4", geolocation=Geolocation(latitude="x", longitude="y"))
        assert map_pin(ip) is None


class TestLocationSummary:
    def test_contains_area(self, full_ip):
        """The location card embeds the point alongside the text."""
        card = location_summary(full_ip)
        text = card.document.to_plain()
        assert text.startswith("-- Location of 8.8.8.8 --\n\n")
        assert "General Area" in text
        assert card.document.point == GeoPoint(37.4056, -122.0775)

    def test_no_point_without_coordinates(self, bare_ip):
        """Without a geolocation the location card has no point."""
        assert location_summary(bare_ip).document.point is None

    def test_no_area_without_place_names(self):
        """Coordinates alone do not produce a General Area block."""
        ip = IPRecord(
            address="1.2.3.4",
            geolocation=Geolocation(latitude="1.5", longitude="2.5"),
        )
        text = location_summary(ip).document.to_plain()
        assert "General Area" not in text
        assert "- Latitude: 1.5" in text


class TestCompanySummary:
    def test_renders_company_not_location(self, full_ip):
        """The company card renders company data."""
        text = company_summary(full_ip).document.to_plain()
        assert "Company: Google LLC, google.com" in text
        assert "Location Info:" not in text


class TestNetworkSummary:
    def test_renders_network(self, full_ip):
        """The network card renders the route."""
        card = network_summary(full_ip)
        text = card.document.to_plain()
        assert card.title == "IP ASN Summary"
        assert "- Route: 8.8.8.0/24" in text


class TestASNCards:
    def test_summary(self, asn_record):
        """The ASN summary starts with its title."""
        card = asn_summary(asn_record)
        assert card.title == "General Summary"
        assert card.document.to_plain().startswith("-- Summary of AS15169 --\n\n")

    def test_prefix_list_orders_ipv4_before_ipv6(self, asn_record):
        """IPv4 prefixes are listed before IPv6 ones."""
        text = asn_prefix_list(asn_record).document.to_plain()
        lines = text.splitlines()[2:]
        assert [line.split()[0] for line in lines] == [
            "8.8.4.0/24",
            "8.8.8.0/24",
            "34.0.0.0/15",
            "2001:4860::/32",
        ]

    def test_prefix_list_one_line_per_prefix(self, asn_record):
        """Each prefix gets exactly one line."""
        asn_record.prefixes6 = []
        text = asn_prefix_list(asn_record).document.to_plain()
        assert len(text.splitlines()[2:]) == 3

    def test_long_prefix_list_is_truncated(self):
        """A list too long for one message ends with a count of the rest."""
        asn = ASNRecord(
            label="AS16509",
            name="Amazon.com, Inc.",
            prefixes=[
                Prefix(netblock=f"3.{n}.0.0/16", id=f"AMAZON-{n:04d}", country="US")
                for n in range(300)
            ],
            prefixes6=[Prefix(netblock="2600:1f00::/24", id="AMAZON-IPV6")],
        )

        doc = asn_prefix_list(asn).document
        text = doc.to_plain()
        shown = [line for line in text.splitlines()[2:] if not line.startswith("...")]

        assert len(text) <= 4096
        assert 0 < len(shown) < 301
        assert text.endswith(f"... and {301 - len(shown)} more\n")
        assert doc.spans[-1][0] is Style.ITALIC

    def test_short_prefix_list_not_truncated(self, asn_record):
        """Short lists carry no truncation line."""
        assert "... and" not in asn_prefix_list(asn_record).document.to_plain()


class TestIdempotence:
    def test_same_record_same_html(self, full_ip, asn_record):
        """Building a card twice renders identical HTML."""
        for build, record in (
            (full_summary, full_ip),
            (location_summary, full_ip),
            (company_summary, full_ip),
            (network_summary, full_ip),
            (asn_summary, asn_record),
            (asn_prefix_list, asn_record),
        ):
            assert build(record).document.to_html() == build(record).document.to_html()


class TestReplyCandidate:
    def test_needs_document_or_point(self):
        """A card must carry a document or a point."""
        with pytest.raises(ValueError):
            ReplyCandidate(kind=CandidateKind.FALLBACK, id="-1", title="Empty")

    def test_rejects_document_and_point(self):
        """A card cannot carry both a document and a point."""
        with pytest.raises(ValueError):
            ReplyCandidate(
                kind=CandidateKind.MAP_PIN,
                id="2",
                title="Location",
                document=Document().plain("8.8.8.8"),
                point=GeoPoint(37.4056, -122.0775),
            )
