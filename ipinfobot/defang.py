"""Query normalization: refang obfuscated IPs and canonicalize ASNs."""

from __future__ import annotations

import ipaddress
import re

# Patterns that replace the dot in defanged IPs
_DOT_PATTERNS = [
    r"\[\.\]",
    r"\[dot\]",
    r"\(dot\)",
    r"\(\.\)",
]
_DOT_RE = re.compile("|".join(_DOT_PATTERNS), re.IGNORECASE)

# Defanged IPv6 separators, e.g. 2001[:]4860[:]4860[:][:]8888
_COLON_RE = re.compile(r"\[:\]")

# AS15169, as15169, AS 15169, 15169
_ASN_RE = re.compile(r"^(?:AS\s*)?(\d{1,10})$", re.IGNORECASE)

_MAX_ASN = 2**32 - 1


def refang_ip(text: str) -> str:
    """Replace defanged dot and colon notations with the real characters.

    Handles: [.] [dot] (dot) (.) [:]
    """
    return _COLON_RE.sub(":", _DOT_RE.sub(".", text))


def normalize_ip(text: str) -> str | None:
    """Return the canonical form of an IPv4/IPv6 address, or None."""
    try:
        return str(ipaddress.ip_address(refang_ip(text.strip())))
    except ValueError:
        return None


def normalize_asn(text: str) -> str | None:
    """Return ``AS<number>`` for anything that names an ASN, or None."""
    match = _ASN_RE.match(text.strip())
    if not match:
        return None
    number = int(match.group(1))
    if number > _MAX_ASN:
        return None
    return f"AS{number}"
