from quishguard.utils.domains import (
    extract_root_domain,
    get_hostname,
    host_matches,
    is_ip_address,
    strip_tld,
)


def test_get_hostname_strips_port_and_credentials():
    assert get_hostname("https://user:pw@Example.COM:8443/path?q=1") == "example.com"
    assert get_hostname("not a url") == ""


def test_extract_root_domain():
    assert extract_root_domain("example.com") == "example.com"
    assert extract_root_domain("accounts.google.com") == "google.com"
    assert extract_root_domain("a.b.example.com") == "example.com"
    assert extract_root_domain("shop.example.co.uk") == "example.co.uk"
    assert extract_root_domain("www.bank.com.au") == "bank.com.au"
    assert extract_root_domain("localhost") == "localhost"


def test_strip_tld():
    assert strip_tld("paypa1.com") == "paypa1"
    assert strip_tld("www.PayPal.com") == "paypal"
    assert strip_tld("shop.example.co.uk") == "shop.example"
    assert strip_tld("zoom.us") == "zoom"


def test_is_ip_address():
    assert is_ip_address("192.168.1.1")
    assert is_ip_address("::1")
    assert not is_ip_address("example.com")
    assert not is_ip_address("999.1.1.1")


def test_host_matches_exact_or_subdomain_only():
    shorteners = ["bit.ly", "t.co"]
    assert host_matches("bit.ly", shorteners) == "bit.ly"
    assert host_matches("www.bit.ly", shorteners) == "bit.ly"
    assert host_matches("microsoft.com", shorteners) is None
    assert host_matches("rabbit.ly", shorteners) is None
