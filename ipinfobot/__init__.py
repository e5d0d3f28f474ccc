"""ipinfobot: Telegram inline bot for IP and ASN lookups via ipinfo.io."""

__version__ = "0.1.0"
