"""Tests for listing URL allow-list, id extraction and canonical form."""

import pytest

from bidclaim.claims.urls import canonicalize_url, extract_auction_id, is_allowed_url


class TestIsAllowedUrl:
    @pytest.mark.parametrize("url", [
        "https://hibid.com/catalog/697243/auction-name",
        "https://hibid.com/lot/12345/item-name",
        "https://subdomain.hibid.com/catalog/12345/auction-name",
        "https://hibid.com/florida/catalog/12345/auction-name",
        "http://www.hibid.com/auction/555",
        "https://hibid.com/catalog/42000?ref=email",
    ])
    def test_accepts_listing_urls(self, url):
        assert is_allowed_url(url) is True

    @pytest.mark.parametrize("url", [
        "",
        None,
        "https://example.com/catalog/123",
        "https://hibid.com.evil.net/catalog/123",
        "https://evilhibid.com/catalog/123",
        "https://hibid.com/catalog/abc",
        "https://hibid.com/",
        "ftp://hibid.com/catalog/123",
    ])
    def test_rejects_other_urls(self, url):
        assert is_allowed_url(url) is False


class TestExtractAuctionId:
    def test_catalog_path(self):
        assert extract_auction_id("https://hibid.com/catalog/42000/estate-tools") == "42000"

    def test_lot_path(self):
        assert extract_auction_id("https://hibid.com/lot/98765/oak-desk") == "98765"

    def test_nested_path(self):
        assert extract_auction_id("https://hibid.com/florida/catalog/12345/x") == "12345"

    def test_query_fallback(self):
        assert extract_auction_id("https://hibid.com/search?auctionId=777") == "777"
        assert extract_auction_id("https://hibid.com/view?id=31") == "31"

    def test_path_wins_over_query(self):
        assert extract_auction_id("https://hibid.com/catalog/1?id=2") == "1"

    def test_no_identifier(self):
        assert extract_auction_id("https://hibid.com/about") is None
        assert extract_auction_id("") is None


class TestCanonicalizeUrl:
    def test_strips_query_and_trailing_slash(self):
        assert canonicalize_url("https://hibid.com/catalog/42000/x/?utm=1") == "https://hibid.com/catalog/42000/x"

    def test_idempotent(self):
        url = "https://hibid.com/catalog/42000//?a=b"
        once = canonicalize_url(url)
        assert canonicalize_url(once) == once

    def test_equivalent_urls_share_canonical_form(self):
        a = canonicalize_url("https://hibid.com/catalog/42000/estate-tools")
        b = canonicalize_url("https://hibid.com/catalog/42000/estate-tools/?src=newsletter")
        assert a == b

    def test_same_identifier_after_canonicalization(self):
        url = "https://hibid.com/catalog/42000/estate-tools?x=1"
        assert extract_auction_id(canonicalize_url(url)) == extract_auction_id(url)
