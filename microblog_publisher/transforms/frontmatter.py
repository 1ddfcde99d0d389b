"""Front matter decoding and encoding for Micro.blog Publisher.

Notes carry a YAML block between ``---`` lines. The block is loaded with a
resolver that has no implicit timestamp type, so ``date: 2024-03-05 14:30``
stays the string the author wrote instead of becoming a datetime.
"""

import re
from typing import Any, Dict, List, Optional, Union

import titlecase as tc
import yaml

from microblog_publisher.core.models import FrontMatter, MalformedMetadataError, PreconditionError

# Values are str | List[str] | any other YAML scalar; read them with
# text_value() and list_value() rather than inspecting them ad hoc.
MetadataValue = Union[str, List[str], Any]

FRONTMATTER_PATTERN = re.compile(
    r'\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)', re.DOTALL | re.MULTILINE
)

TIMESTAMP_TAG = 'tag:yaml.org,2002:timestamp'


def _without_timestamps(resolvers: Dict[Any, list]) -> Dict[Any, list]:
    return {
        first: [(tag, regexp) for tag, regexp in entries if tag != TIMESTAMP_TAG]
        for first, entries in resolvers.items()
    }


class ScalarPreservingLoader(yaml.SafeLoader):
    """SafeLoader that never turns date-like scalars into date objects."""


class ScalarPreservingDumper(yaml.SafeDumper):
    """SafeDumper matching ScalarPreservingLoader, so date strings stay unquoted."""


ScalarPreservingLoader.yaml_implicit_resolvers = _without_timestamps(
    yaml.SafeLoader.yaml_implicit_resolvers
)
ScalarPreservingDumper.yaml_implicit_resolvers = _without_timestamps(
    yaml.SafeDumper.yaml_implicit_resolvers
)


def decode(raw: str) -> FrontMatter:
    """Split a note into its metadata mapping and body.

    Args:
        raw: Full file content

    Returns:
        FrontMatter; metadata is empty when the note has no block

    Raises:
        MalformedMetadataError: If a block is present but is not a YAML mapping
    """
    match = FRONTMATTER_PATTERN.match(raw)
    if not match:
        return FrontMatter(metadata={}, body=raw)

    try:
        data = yaml.load(match.group(1), Loader=ScalarPreservingLoader)
    except yaml.YAMLError as e:
        raise MalformedMetadataError(f"Failed to parse front matter: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise MalformedMetadataError(
            f"Front matter must be a mapping, got {type(data).__name__}"
        )

    return FrontMatter(metadata=data, body=raw[match.end():])


def encode(body: str, metadata: Dict[str, Any]) -> str:
    """Serialize metadata and body back into note text.

    Key order is preserved. A note without metadata is returned as its body.
    """
    if not metadata:
        return body

    frontmatter_str = yaml.dump(
        metadata,
        Dumper=ScalarPreservingDumper,
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
        width=4096,
    )
    return f"---\n{frontmatter_str}---\n{body}"


def text_value(value: MetadataValue, default: str = "") -> str:
    """Return a string metadata value, or default for any other variant."""
    if isinstance(value, str):
        return value
    return default


def list_value(value: MetadataValue) -> List[str]:
    """Return a metadata value as a list of non-empty strings.

    A scalar becomes a one-element list; None becomes an empty list.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        items = [str(item).strip() for item in value if item is not None]
        return [item for item in items if item]
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    return [str(value)]


def require_status(metadata: Dict[str, Any], expected: str = "published") -> None:
    """Raise PreconditionError unless metadata status matches expected.

    The comparison is case-insensitive.
    """
    status = metadata.get('status')
    actual = "" if status is None else str(status).strip()
    if actual.lower() != expected.lower():
        raise PreconditionError(
            f"Not publishing: 'status: {expected}' missing from frontmatter"
            + (f" (found {actual!r})" if actual else "")
        )


def canonical_title(title: str, use_titlecase: bool = False) -> str:
    """Normalize a note title for writing back into front matter.

    Args:
        title: Title as found in the note
        use_titlecase: Convert to title case with the titlecase library

    Returns:
        Stripped (and optionally title-cased) title
    """
    title = title.strip()
    if use_titlecase and title:
        title = tc.titlecase(title)
    return title


def published_frontmatter(
    metadata: Dict[str, Any],
    post_id: str,
    url: str,
    title: str,
    date: str,
) -> Dict[str, Any]:
    """Return a copy of metadata with the fields recorded after a create.

    Args:
        metadata: Original metadata (not modified)
        post_id: Micro.blog post id, stored as ``microblog_id``
        url: Public post URL
        title: Post title
        date: Local display date string

    Returns:
        New metadata mapping; untouched keys keep their order and values
    """
    result = metadata.copy()
    result['microblog_id'] = post_id
    result['url'] = url
    result['title'] = title
    result['date'] = date
    return result


def remote_post_id(metadata: Dict[str, Any]) -> Optional[str]:
    """Return the stored Micro.blog post id, if any."""
    value = metadata.get('microblog_id')
    if value is None or isinstance(value, (list, dict, bool)):
        return None
    value = str(value).strip()
    return value or None
