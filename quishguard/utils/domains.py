"""Hostname and domain-shape helpers."""
import ipaddress
from typing import Iterable, Optional
from urllib.parse import urlparse

import tldextract

# Bundled public-suffix snapshot; no network fetch at runtime.
_extract = tldextract.TLDExtract(suffix_list_urls=(), cache_dir=None)

SECOND_LEVEL_SUFFIXES = {'co', 'com', 'org', 'net', 'gov', 'edu', 'ac'}


def get_hostname(url: str) -> str:
    """Lower-cased hostname of ``url`` without port or credentials."""
    return (urlparse(url).hostname or "").lower()


def extract_root_domain(domain: str) -> str:
    """
    Registrable root of ``domain``.

    ``shop.example.co.uk`` -> ``example.co.uk``; ``a.b.example.com`` ->
    ``example.com``.
    """
    parts = domain.lower().split('.')
    if len(parts) <= 2:
        return domain.lower()
    if parts[-2] in SECOND_LEVEL_SUFFIXES:
        return '.'.join(parts[-3:])
    return '.'.join(parts[-2:])


def strip_tld(domain: str) -> str:
    """Hostname minus its public suffix and a leading ``www.``, lower-cased."""
    ext = _extract(domain.lower())
    labels = [label for label in (ext.subdomain, ext.domain) if label]
    stripped = '.'.join(labels) or domain.lower()
    if stripped.startswith('www.'):
        stripped = stripped[4:]
    return stripped


def is_ip_address(host: str) -> bool:
    try:
        ipaddress.ip_address(host.strip('[]'))
        return True
    except ValueError:
        return False


def host_matches(host: str, domains: Iterable[str]) -> Optional[str]:
    """Return the entry of ``domains`` that ``host`` equals or is a subdomain of."""
    host = host.lower()
    for domain in domains:
        if host == domain or host.endswith('.' + domain):
            return domain
    return None
