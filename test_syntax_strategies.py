#!/usr/bin/env python3
"""
Tests for the offline syntax strategies:
1. Basic shape check (local@domain.tld)
2. Strict RFC-leaning check (length, leading/trailing dot, grammar)
3. Every basic rejection is also a strict rejection
"""

import pytest

from mailsift import BasicSyntaxStrategy, StrictSyntaxStrategy, Verdict


SAMPLE_ADDRESSES = [
    "user@example.com",
    "a@b.c",
    "not-an-email",
    "@example.com",
    "user@",
    "user@@example.com",
    "user@example",
    "us er@example.com",
    "user@exa mple.com",
    ".start@x.com",
    "end.@x.com",
    "user@x.com.",
    "first.last@sub.example.co.uk",
    "first..last@example.com",
    "user+tag@example.org",
    "o'brien@example.ie",
    '"quoted"@example.com',
    '"with space"@example.com',
    "user@[192.168.0.1]",
    "user@[IPv6:2001:db8::1]",
    "user@-example.com",
    "user@example-.com",
    "user@example.c0m",
    "x" * 65 + "@example.com",
    "a@" + "b" * 250 + ".com",
    "",
    "user@exa_mple.com",
    "ümlaut@example.de",
]


def test_basic_accepts_simple_shapes():
    """Basic syntax on the reference scenario."""
    basic = BasicSyntaxStrategy()

    assert basic.classify("user@example.com") is Verdict.VALID
    assert basic.classify("not-an-email") is Verdict.INVALID
    assert basic.classify("a@b.c") is Verdict.VALID


@pytest.mark.parametrize("email", [
    "@example.com",
    "user@",
    "user@@example.com",
    "user@example",
    "us er@example.com",
    "user@example.com\n",
    "",
])
def test_basic_rejects_malformed(email):
    assert BasicSyntaxStrategy().classify(email) is Verdict.INVALID


def test_strict_leading_dot_scenario():
    strict = StrictSyntaxStrategy()

    assert strict.classify(".start@x.com") is Verdict.INVALID
    assert strict.classify("ok@x.com") is Verdict.VALID


@pytest.mark.parametrize("email", [
    "user@example.com",
    "first.last@sub.example.co.uk",
    "user+tag@example.org",
    "o'brien@example.ie",
    '"quoted"@example.com',
    "user@[192.168.0.1]",
])
def test_strict_accepts_rfc_addresses(email):
    assert StrictSyntaxStrategy().classify(email) is Verdict.VALID


@pytest.mark.parametrize("email, reason", [
    ("end.@x.com", "dot-atom"),
    ("user@x.com.", "end with dot"),
    ("first..last@example.com", "dot-atom"),
    ("a@b.c", "TLD"),
    ("user@-example.com", "label"),
    ("user@example-.com", "label"),
    ("user@example.c0m", "TLD"),
    ("x" * 65 + "@example.com", "local part length"),
    ("a@" + "b" * 250 + ".com", "total length"),
    ("user@exa_mple.com", "underscore in domain"),
    ("user@example.com\n", "trailing newline"),
    ('"with space"@example.com', "whitespace"),
])
def test_strict_rejects(email, reason):
    is_valid, error = StrictSyntaxStrategy().validate(email)

    assert not is_valid, reason
    assert error


def test_strict_length_rule_applies_before_grammar():
    email = "a" * 70 + "@" + ".".join(["b" * 60] * 3) + ".com"
    assert len(email) > 254

    is_valid, error = StrictSyntaxStrategy().validate(email)

    assert not is_valid
    assert "254" in error


def test_strict_rejects_everything_basic_rejects():
    basic = BasicSyntaxStrategy()
    strict = StrictSyntaxStrategy()

    for email in SAMPLE_ADDRESSES:
        if basic.classify(email) is Verdict.INVALID:
            assert strict.classify(email) is Verdict.INVALID, email


def test_strict_is_stricter_than_basic():
    basic = BasicSyntaxStrategy()
    strict = StrictSyntaxStrategy()

    assert basic.classify("a@b.c") is Verdict.VALID
    assert strict.classify("a@b.c") is Verdict.INVALID


def test_classification_is_idempotent():
    for strategy in (BasicSyntaxStrategy(), StrictSyntaxStrategy()):
        for email in SAMPLE_ADDRESSES:
            assert strategy.classify(email) is strategy.classify(email)
