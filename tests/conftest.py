"""Shared lookup records."""

import pytest

from ipinfobot.models import (
    ASNRecord,
    Company,
    Geolocation,
    IPNetwork,
    IPRecord,
    Prefix,
)


@pytest.fixture
def location():
    return Geolocation(
        latitude="37.4056",
        longitude="-122.0775",
        city="Mountain View",
        region="California",
        country_name="United States",
        postal="94043",
    )


@pytest.fixture
def full_ip(location):
    return IPRecord(
        address="8.8.8.8",
        hostname="dns.google",
        geolocation=location,
        company=Company(name="Google LLC", domain="google.com", type="hosting"),
        network=IPNetwork(
            label="AS15169",
            name="Google LLC",
            domain="google.com",
            route="8.8.8.0/24",
            type="hosting",
        ),
        organization="AS15169 Google LLC",
        phone="+1-650-253-0000",
    )


@pytest.fixture
def bare_ip():
    return IPRecord(address="10.0.0.1")


@pytest.fixture
def asn_record():
    return ASNRecord(
        label="AS15169",
        name="Google LLC",
        domain="google.com",
        country="US",
        registry="arin",
        allocated="2000-03-30",
        num_ips=16_777_216,
        prefixes=[
            Prefix(netblock="8.8.4.0/24", id="LVLT-GOGL-8-8-4", country="US"),
            Prefix(netblock="8.8.8.0/24", id="LVLT-GOGL-8-8-8", country="US"),
            Prefix(netblock="34.0.0.0/15"),
        ],
        prefixes6=[
            Prefix(netblock="2001:4860::/32", id="GOOGLE-IPV6", country="US"),
        ],
    )
