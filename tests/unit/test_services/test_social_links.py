"""
Unit tests for social link extraction from channel bios.
"""

import pytest

from pixeltube.services.social_links import (
    PLATFORM_LINK_PATTERNS,
    extract_channel_links,
    extract_links_from_markdown,
    match_platform_link,
)


@pytest.mark.unit
class TestExtractLinksFromMarkdown:
    """Tests for markdown/bare URL scanning and classification."""

    def test_markdown_and_bare_links(self):
        text = "Follow on [Twitter](https://twitter.com/x) and https://patreon.com/y"
        assert extract_links_from_markdown(text) == {
            "Twitter": "https://twitter.com/x",
            "Patreon": "https://patreon.com/y",
        }

    def test_own_domain_is_skipped(self):
        text = "More at https://pixeltube.org/c/alice and [here](https://www.pixeltube.org/w/abc)"
        assert extract_links_from_markdown(text) == {}

    def test_custom_own_domain(self):
        text = "https://tube.example/c/alice https://pixeltube.org/c/alice"
        assert extract_links_from_markdown(text, own_domain="tube.example") == {
            "Website": "https://pixeltube.org/c/alice",
        }

    def test_first_url_per_platform_wins(self):
        text = "https://github.com/first https://github.com/second"
        assert extract_links_from_markdown(text) == {"GitHub": "https://github.com/first"}

    def test_mastodon_actor_shape(self):
        text = "https://fosstodon.org/@alice https://mastodon.social/@bob"
        assert extract_links_from_markdown(text) == {"Mastodon": "https://fosstodon.org/@alice"}

    def test_mastodon_by_table_pattern(self):
        assert extract_links_from_markdown("https://mastodon.social/users/alice") == {
            "Mastodon": "https://mastodon.social/users/alice",
        }

    def test_unknown_links_become_single_website(self):
        text = "https://alice.dev and https://alice-blog.net"
        assert extract_links_from_markdown(text) == {"Website": "https://alice.dev"}

    def test_bare_url_bounded_by_html(self):
        text = "<p>https://github.com/alice</p>"
        assert extract_links_from_markdown(text) == {"GitHub": "https://github.com/alice"}

    def test_url_inside_attribute_is_not_bare(self):
        text = '<a href="https://github.com/alice">code</a>'
        assert extract_links_from_markdown(text) == {}

    def test_bare_url_stops_at_paren(self):
        text = "(see https://ko-fi.com/alice)"
        assert extract_links_from_markdown(text) == {"Ko-fi": "https://ko-fi.com/alice"}

    @pytest.mark.parametrize("text", [None, "", "no links here", "ftp://files.example/x"])
    def test_no_links(self, text):
        assert extract_links_from_markdown(text) == {}

    def test_keys_are_unique(self):
        text = " ".join(f"https://patreon.com/u{i}" for i in range(5))
        links = extract_links_from_markdown(text)
        assert list(links) == ["Patreon"]
        assert links["Patreon"] == "https://patreon.com/u0"


@pytest.mark.unit
class TestPlatformTable:
    """Tests for platform pattern matching."""

    def test_table_order(self):
        assert match_platform_link("https://discord.gg/abc") == "Discord"
        assert match_platform_link("https://www.x.com/alice") == "Twitter"
        assert match_platform_link("https://store.example.com") == "Store"
        assert match_platform_link("https://unknown.example") is None

    def test_every_platform_has_patterns(self):
        assert all(PLATFORM_LINK_PATTERNS.values())


@pytest.mark.unit
class TestExtractChannelLinks:
    """Tests for merging bio and support links."""

    def test_bio_takes_precedence(self):
        links = extract_channel_links(
            "[Patreon](https://patreon.com/bio)",
            "https://patreon.com/support https://ko-fi.com/support",
        )
        assert links == {
            "Patreon": "https://patreon.com/bio",
            "Ko-fi": "https://ko-fi.com/support",
        }

    def test_support_only(self):
        assert extract_channel_links(None, "https://liberapay.com/alice") == {
            "Liberapay": "https://liberapay.com/alice",
        }
