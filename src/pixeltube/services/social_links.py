"""Social link extraction from channel bios.

Scans free text for markdown links and bare URLs and classifies each one
against PLATFORM_LINK_PATTERNS. The first URL found for a platform wins.
"""

import re
from typing import Dict, List, Optional

# Checked in order; first matching platform wins.
PLATFORM_LINK_PATTERNS: Dict[str, List[str]] = {
    "Patreon": ["patreon.com"],
    "Twitter": ["twitter.com", "x.com"],
    "YouTube": ["youtube.com", "youtu.be"],
    "Instagram": ["instagram.com"],
    "Facebook": ["facebook.com", "fb.com"],
    "Reddit": ["reddit.com"],
    "Discord": ["discord.gg", "discord.com"],
    "Twitch": ["twitch.tv"],
    "TikTok": ["tiktok.com"],
    "LinkedIn": ["linkedin.com"],
    "GitHub": ["github.com"],
    "Ko-fi": ["ko-fi.com"],
    "Buy Me a Coffee": ["buymeacoffee.com"],
    "Nebula": ["nebula.tv", "nebula.app"],
    "Floatplane": ["floatplane.com"],
    "Odysee": ["odysee.com"],
    "Rumble": ["rumble.com"],
    "BitChute": ["bitchute.com"],
    "Mastodon": ["mastodon", "mstdn."],
    "Threads": ["threads.net"],
    "Bluesky": ["bluesky", "bsky.app"],
    "Spotify": ["spotify.com"],
    "SoundCloud": ["soundcloud.com"],
    "Bandcamp": ["bandcamp.com"],
    "Apple Podcasts": ["apple.com/podcast", "podcasts.apple.com"],
    "Store": ["dftba.com", "store."],
    "Gumroad": ["gumroad.com"],
    "Substack": ["substack.com"],
    "Medium": ["medium.com"],
    "PayPal": ["paypal.com", "paypal.me"],
    "Venmo": ["venmo.com"],
    "Cash App": ["cashapp.com", "cash.app"],
    "Liberapay": ["liberapay.com"],
    "Open Collective": ["opencollective.com"],
}

MASTODON = "Mastodon"
WEBSITE = "Website"
DEFAULT_OWN_DOMAIN = "pixeltube.org"

# [text](url) or a bare URL at the start, after whitespace or after '>'.
# Bare URLs stop at whitespace, ')', '<' and '"' so links inside markdown
# or HTML attributes are not swallowed whole.
_LINK_RE = re.compile(
    r"\[([^\]]*)\]\((https?://[^)]+)\)|(^|[\s>])(https?://[^\s)<\"]+)",
    re.IGNORECASE,
)
_MASTODON_ACTOR_RE = re.compile(r"https?://[^/]+/@[^/\s]+")


def match_platform_link(url: str) -> Optional[str]:
    """Platform name for a URL, or None if no pattern matches."""
    for platform, patterns in PLATFORM_LINK_PATTERNS.items():
        if any(pattern in url for pattern in patterns):
            return platform
    return None


def extract_links_from_markdown(
    markdown: Optional[str], own_domain: str = DEFAULT_OWN_DOMAIN
) -> Dict[str, str]:
    """Map platform name -> URL for the links found in ``markdown``."""
    links: Dict[str, str] = {}
    if not markdown:
        return links

    for match in _LINK_RE.finditer(markdown):
        url = match.group(2) or match.group(4)
        if not url:
            continue

        if own_domain and own_domain in url:
            continue

        if MASTODON not in links and _MASTODON_ACTOR_RE.search(url):
            links[MASTODON] = url
            continue

        platform = match_platform_link(url)
        if platform:
            links.setdefault(platform, url)
        elif WEBSITE not in links:
            links[WEBSITE] = url

    return links


def extract_channel_links(
    summary: Optional[str],
    support: Optional[str] = None,
    own_domain: str = DEFAULT_OWN_DOMAIN,
) -> Dict[str, str]:
    """Links from the bio, then the support field; bio entries take precedence."""
    links = extract_links_from_markdown(summary, own_domain)
    for platform, url in extract_links_from_markdown(support, own_domain).items():
        links.setdefault(platform, url)
    return links
