"""Embedded image extraction for Obsidian notes."""

import re
from typing import List

from microblog_publisher.core.models import ImageEmbed

# Pattern for embeds: ![[image.png]], ![[image.png|alias]], ![[image.png#section]]
EMBED_PATTERN = re.compile(r'!\[\[([^\]]+)\]\]')

LINK_SUFFIX_PATTERN = re.compile(r'[#|]')


def clean_link(link: str) -> str:
    """Strip a ``#subpath`` or ``|alias`` suffix from a link target."""
    return LINK_SUFFIX_PATTERN.split(link, 1)[0].strip()


def find_image_embeds(content: str) -> List[ImageEmbed]:
    """Find every embed in content, in document order.

    Args:
        content: Note body

    Returns:
        One ImageEmbed per occurrence, with its span in content
    """
    return [
        ImageEmbed(
            marker=match.group(0),
            target=clean_link(match.group(1)),
            start=match.start(),
            end=match.end(),
        )
        for match in EMBED_PATTERN.finditer(content)
    ]


def extract_image_links(content: str) -> List[str]:
    """Return the cleaned link target of every embed in content."""
    return [embed.target for embed in find_image_embeds(content)]


def fallback_alt_text(filename: str) -> str:
    """Derive alt text from a file name: drop the extension, separators to spaces."""
    stem = re.sub(r'\.[^/.]+$', '', filename)
    return re.sub(r'[-_]', ' ', stem)


def markdown_image(alt_text: str, url: str) -> str:
    """Build a standard markdown image reference."""
    return f"![{alt_text}]({url})"
