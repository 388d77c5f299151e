"""tests for IP address normalization"""

import pytest

from app.core.ip_normalizer import AddressValidationError, IPAddressNormalizer


@pytest.fixture
def normalizer():
    return IPAddressNormalizer()


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("10.0.0.1", "10.0.0.1"),
        ("010.000.000.001", "10.0.0.1"),
        ("10.0.0.7/24", "10.0.0.0/24"),
        ("10.0.0.7/32", "10.0.0.7"),
        ("2001:DB8:0:0::1", "2001:db8::1"),
        ("2001:db8::1/128", "2001:db8::1"),
        ("2001:db8:ffff::/32", "2001:db8::/32"),
        ("::ffff:192.168.0.1", "192.168.0.1"),
        ("::ffff:10.0.0.0/104", "10.0.0.0/8"),
        ("::ffff:192.168.1.7/120", "192.168.1.0/24"),
        ("::ffff:192.168.1.7/128", "192.168.1.7"),
        ("10.0.0.1-10.0.0.9", "10.0.0.1-10.0.0.9"),
        ("10.0.0.4-10.0.0.4", "10.0.0.4"),
    ],
)
def test_normalize_one(normalizer, raw, expected):
    """test each supported notation has one canonical form"""
    assert normalizer.normalize_one(raw) == expected


def test_normalize_keeps_order(normalizer):
    """test batch output matches input length and order"""
    assert normalizer.normalize(["10.0.0.2", "10.0.0.1/32", "::1"]) == ["10.0.0.2", "10.0.0.1", "::1"]


@pytest.mark.parametrize(
    "raw",
    ["", "localhost", "10.0.0", "10.0.0.256", "10.0.0.0/33", "10.0.0.9-10.0.0.1", "10.0.0.1-::1", "1.2.3.4/abc"],
)
def test_normalize_rejects(normalizer, raw):
    """test invalid tokens raise AddressValidationError"""
    with pytest.raises(AddressValidationError):
        normalizer.normalize_one(raw)


def test_normalize_fails_whole_batch(normalizer):
    """test one bad token fails the batch"""
    with pytest.raises(AddressValidationError) as exc_info:
        normalizer.normalize(["10.0.0.1", "nope", "10.0.0.2"])
    assert "nope" in str(exc_info.value)
