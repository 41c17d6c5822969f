"""Path-safe resolution of client supplied paths under the storage root.

Containment is enforced by canonicalizing the joined path (symlinks, ``.``
and ``..`` resolved) and comparing it with the canonical root. No textual
``..`` filtering is relied on.
"""

import os
from collections.abc import Iterator, Sequence
from pathlib import Path

from fileserve.core.logging import get_logger
from fileserve.domain.entities.file import ResolvedFile
from fileserve.domain.exceptions import InvalidArgumentError, PathEscapeError

logger = get_logger(__name__)


class PathResolver:
    """Maps a requested path to a regular file contained in the storage root."""

    def __init__(self, root_path: str | Path, candidate_extensions: Sequence[str] = ()) -> None:
        """Initialize the resolver.

        Args:
            root_path: Storage root. Relative paths resolve against the cwd.
            candidate_extensions: Extensions tried, in order, when a requested
                path has none. First match wins.
        """
        self._root = os.path.realpath(os.fspath(root_path))
        # Trailing separator so "/data/files-other" is not inside "/data/files"
        self._root_prefix = os.path.normcase(os.path.join(self._root, ""))
        self._candidate_extensions = tuple(candidate_extensions)

    @property
    def root(self) -> Path:
        return Path(self._root)

    def resolve(
        self,
        requested_path: str | None,
        candidate_extensions: Sequence[str] | None = None,
    ) -> ResolvedFile | None:
        """Resolve a requested path, trying candidate extensions if it has none.

        Args:
            requested_path: Client path relative to the root, forward slashes.
            candidate_extensions: Overrides the configured candidates.

        Returns:
            The resolved file, or None if nothing matches. A path that escapes
            the root also yields None.

        Raises:
            InvalidArgumentError: If the path is empty.
        """
        if requested_path is None or not requested_path.strip():
            raise InvalidArgumentError("File path is required")

        # The OS rejects NUL bytes in paths, so no file can match
        if "\x00" in requested_path:
            logger.warning("Blocked path with NUL byte", requested_path=requested_path)
            return None

        normalized = self._normalize_separators(requested_path)
        candidates = self._candidate_extensions if candidate_extensions is None else candidate_extensions

        try:
            resolved = self._resolve_exact(normalized)
            if resolved is not None:
                return resolved

            basename = os.path.basename(normalized)
            if basename and not os.path.splitext(basename)[1]:
                for extension in candidates:
                    resolved = self._resolve_exact(normalized + extension)
                    if resolved is not None:
                        logger.debug(
                            "Resolved path by extension auto-detection",
                            requested_path=requested_path,
                            resolved_path=resolved.relative_path,
                        )
                        return resolved
        except PathEscapeError:
            logger.warning("Blocked path outside storage root", requested_path=requested_path)
            return None

        return None

    def iter_files(self) -> Iterator[ResolvedFile]:
        """Walk every regular file under the root, depth first, in sorted order.

        Symlinked directories are not descended into. Symlinked files are
        listed only if their target is inside the root.
        """
        stack = [self._root]
        while stack:
            current = stack.pop()
            try:
                entries = sorted(os.scandir(current), key=lambda entry: entry.name)
            except OSError as e:
                logger.warning("Failed to list directory", path=current, error=str(e))
                continue

            directories = []
            for entry in entries:
                if entry.is_dir(follow_symlinks=False):
                    directories.append(entry.path)
                    continue
                if entry.is_dir():
                    continue
                canonical = os.path.realpath(entry.path)
                if self._is_contained(canonical) and os.path.isfile(canonical):
                    yield self._to_resolved(canonical)
            # Reversed so the sorted order is kept when popping from the stack
            stack.extend(reversed(directories))

    def _resolve_exact(self, relative: str) -> ResolvedFile | None:
        canonical = os.path.realpath(os.path.join(self._root, relative))
        if not self._is_contained(canonical):
            raise PathEscapeError(relative)
        if not os.path.isfile(canonical):
            return None
        return self._to_resolved(canonical)

    def _is_contained(self, canonical: str) -> bool:
        normalized = os.path.normcase(canonical)
        return normalized.startswith(self._root_prefix) or normalized == os.path.normcase(self._root)

    def _to_resolved(self, canonical: str) -> ResolvedFile:
        relative = Path(os.path.relpath(canonical, self._root)).as_posix()
        return ResolvedFile(
            absolute_path=Path(canonical),
            relative_path=relative,
            extension=os.path.splitext(canonical)[1].lower(),
        )

    @staticmethod
    def _normalize_separators(path: str) -> str:
        return path.replace("/", os.sep).replace("\\", os.sep)
