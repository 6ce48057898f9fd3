"""Tests for cart token issuing and verification."""

from datetime import datetime, timedelta, timezone

from storefront.security.cart_token import CartTokenCodec


def test_round_trip():
    codec = CartTokenCodec("secret")
    assert codec.read(codec.issue("cart_abc")) == "cart_abc"


def test_token_does_not_expose_raw_id_as_token():
    token = CartTokenCodec("secret").issue("cart_abc")
    assert token != "cart_abc"


def test_expired_token_is_rejected():
    codec = CartTokenCodec("secret", max_age=timedelta(days=30))
    issued = datetime.now(timezone.utc) - timedelta(days=31)
    assert codec.read(codec.issue("cart_abc", now=issued)) is None


def test_token_signed_with_other_secret_is_rejected():
    forged = CartTokenCodec("attacker").issue("cart_abc")
    assert CartTokenCodec("secret").read(forged) is None


def test_garbage_and_missing_tokens():
    codec = CartTokenCodec("secret")
    assert codec.read("not-a-token") is None
    assert codec.read("") is None
    assert codec.read(None) is None
