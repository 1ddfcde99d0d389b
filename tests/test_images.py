"""Tests for embedded image extraction."""

from microblog_publisher.transforms.images import (
    clean_link,
    extract_image_links,
    fallback_alt_text,
    find_image_embeds,
    markdown_image,
)


class TestExtraction:
    """Tests for find_image_embeds and extract_image_links."""

    def test_document_order(self):
        content = "![[b.png]] text ![[a.jpg]]\n![[c.gif]]"
        assert extract_image_links(content) == ["b.png", "a.jpg", "c.gif"]

    def test_strips_alias_and_subpath(self):
        content = "![[photo.png|300]] ![[diagram.webp#crop]] ![[folder/pic.jpeg|alt text]]"
        assert extract_image_links(content) == ["photo.png", "diagram.webp", "folder/pic.jpeg"]

    def test_plain_wikilinks_ignored(self):
        assert extract_image_links("[[photo.png]] and ![alt](x.png)") == []

    def test_spans(self):
        content = "Intro ![[photo.png|small]] end"
        [embed] = find_image_embeds(content)
        assert embed.marker == "![[photo.png|small]]"
        assert embed.target == "photo.png"
        assert content[embed.start:embed.end] == embed.marker

    def test_repeated_marker_found_twice(self):
        embeds = find_image_embeds("![[a.png]]\n![[a.png]]")
        assert [e.start for e in embeds] == [0, 11]

    def test_empty(self):
        assert find_image_embeds("no images here") == []


class TestHelpers:
    def test_clean_link(self):
        assert clean_link("photo.png#section|alias") == "photo.png"

    def test_fallback_alt_text(self):
        assert fallback_alt_text("my-cool_photo.png") == "my cool photo"
        assert fallback_alt_text("noext") == "noext"

    def test_markdown_image(self):
        assert markdown_image("a cat", "https://x/y.png") == "![a cat](https://x/y.png)"
