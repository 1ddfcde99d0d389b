"""Text transforms: front matter, dates and image embeds."""
