"""Vault access: reading, writing, trashing and link resolution."""

import logging
from pathlib import Path, PurePosixPath
from typing import List, Optional, Protocol, Union

import aiofiles
import aiofiles.os

from microblog_publisher.core.models import NoteContext

logger = logging.getLogger(__name__)


class DocumentStore(Protocol):
    """What the pipelines need from the host that owns the notes."""

    async def read_text(self, path: Path) -> str: ...

    async def read_binary(self, path: Path) -> bytes: ...

    async def write_text(self, path: Path, content: str) -> None: ...

    async def trash(self, path: Path) -> Path: ...

    def resolve_link(self, link: str, source_path: Optional[Path] = None) -> Optional[Path]: ...


class VaultStore:
    """Filesystem-backed store for an Obsidian vault."""

    def __init__(self, vault_path: Union[str, Path], trash_dir: str = ".trash"):
        """Initialize VaultStore.

        Args:
            vault_path: Path to the Obsidian vault root
            trash_dir: Vault-relative folder that deleted files are moved to
        """
        self.vault_path = Path(vault_path)
        self.trash_path = self.vault_path / trash_dir

    def get_note(self, name_or_path: str) -> Optional[NoteContext]:
        """Find a note by path or file name.

        Args:
            name_or_path: Full path, vault-relative path, or note name
                (with or without .md)

        Returns:
            NoteContext if found, None otherwise
        """
        name_or_path = name_or_path.strip()
        if not name_or_path:
            return None

        path = Path(name_or_path)
        if not path.name:
            return None
        if path.suffix != '.md':
            path = path.with_name(f"{path.name}.md")

        for candidate in (path, self.vault_path / path):
            if candidate.is_file():
                return NoteContext(path=candidate)

        resolved = self.resolve_link(name_or_path)
        if resolved is not None and resolved.suffix == '.md':
            return NoteContext(path=resolved)
        return None

    async def read_text(self, path: Path) -> str:
        async with aiofiles.open(path, 'r', encoding='utf-8', newline='') as f:
            return await f.read()

    async def read_binary(self, path: Path) -> bytes:
        async with aiofiles.open(path, 'rb') as f:
            return await f.read()

    async def write_text(self, path: Path, content: str) -> None:
        async with aiofiles.open(path, 'w', encoding='utf-8', newline='') as f:
            await f.write(content)

    async def trash(self, path: Path) -> Path:
        """Move a file into the vault trash folder.

        Returns:
            The file's new location
        """
        await aiofiles.os.makedirs(self.trash_path, exist_ok=True)
        target = self.trash_path / path.name
        counter = 1
        while target.exists():
            target = self.trash_path / f"{path.stem} {counter}{path.suffix}"
            counter += 1
        await aiofiles.os.rename(path, target)
        logger.debug("Moved %s to %s", path, target)
        return target

    def resolve_link(self, link: str, source_path: Optional[Path] = None) -> Optional[Path]:
        """Resolve a wikilink target to a file, the way Obsidian does.

        Tries the vault-relative path, then the path relative to the linking
        note's folder, then the shortest vault path whose tail matches the link.
        Links without an extension refer to notes.

        Args:
            link: Link target without subpath or alias
            source_path: Path of the note containing the link

        Returns:
            Path of the matching file, or None
        """
        link = link.strip().lstrip('/')
        if not link:
            return None

        link_path = PurePosixPath(link)
        if not link_path.suffix:
            link_path = link_path.with_name(f"{link_path.name}.md")

        candidates = [self.vault_path / link_path]
        if source_path is not None:
            candidates.append(Path(source_path).parent / link_path)
        for candidate in candidates:
            if candidate.is_file():
                return candidate

        matches = self._find_by_tail(link_path)
        if not matches:
            return None
        return min(matches, key=lambda p: (len(p.relative_to(self.vault_path).parts), str(p)))

    def _find_by_tail(self, link_path: PurePosixPath) -> List[Path]:
        tail = [part.lower() for part in link_path.parts]
        matches = []
        for path in self.vault_path.rglob('*'):
            if path.name.lower() != tail[-1] or not path.is_file():
                continue
            rel_parts = path.relative_to(self.vault_path).parts
            if any(part.startswith('.') for part in rel_parts[:-1]):
                continue
            if [part.lower() for part in rel_parts[-len(tail):]] == tail:
                matches.append(path)
        return matches
