"""Resolve a possibly stale image key to bytes in object storage.

Keys have been written in several shapes over the life of the site: bare
filenames, ``images/`` prefixed keys, keys with the bucket id in front and
the occasional doubled prefix. Rather than trusting the caller's key, the
resolver walks an ordered list of named strategies, each turning the
requested key into one candidate, and tries every distinct candidate once.
When all of them miss, it falls back to scanning the store for a key whose
filename looks like the requested one.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from homestead.config import settings
from homestead.services.image_keys import (
    basename,
    folder_prefix,
    has_folder_prefix,
    normalize,
    strip_folder,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolutionStrategy:
    name: str
    candidate: Callable[[str], Optional[str]]


@dataclass
class ResolvedObject:
    key: str
    data: bytes
    strategy: str


def default_strategies(
    bucket_id: Optional[str] = None, folder: Optional[str] = None
) -> List[ResolutionStrategy]:
    """The historical key formats, most likely first."""
    bucket = (bucket_id or settings.OBJECT_STORAGE_BUCKET_ID).strip("/")
    prefix = folder_prefix(folder)

    def exact(key):
        return key

    def normalized(key):
        return normalize(key, folder)

    def bucket_normalized(key):
        return f"{bucket}/{normalize(key, folder)}" if bucket else None

    def bucket_exact(key):
        return f"{bucket}/{key}" if bucket else None

    def bare_filename(key):
        return basename(key) if "/" in key else None

    def prefixed_filename(key):
        return f"{prefix}{basename(key)}" if "/" in key else None

    def unprefixed(key):
        return strip_folder(key, folder) if has_folder_prefix(key, folder) else None

    return [
        ResolutionStrategy("exact", exact),
        ResolutionStrategy("normalized", normalized),
        ResolutionStrategy("bucket_normalized", bucket_normalized),
        ResolutionStrategy("bucket_exact", bucket_exact),
        ResolutionStrategy("basename", bare_filename),
        ResolutionStrategy("basename_prefixed", prefixed_filename),
        ResolutionStrategy("unprefixed", unprefixed),
    ]


def fuzzy_matches(requested_key: str, stored_keys: List[str]) -> List[str]:
    """Stored keys whose filename contains, or is contained in, the requested one."""
    wanted = basename(requested_key).lower()
    if not wanted:
        return []
    matches = []
    for stored in stored_keys:
        name = basename(stored).lower()
        if name and (wanted in name or name in wanted):
            matches.append(stored)
    return matches


class ImageResolver:
    def __init__(self, store, strategies: Optional[List[ResolutionStrategy]] = None):
        self.store = store
        self.strategies = (
            strategies
            if strategies is not None
            else default_strategies(getattr(store, "bucket_id", None))
        )

    def candidates(self, key: str) -> List[tuple]:
        """Distinct ``(strategy name, candidate key)`` pairs in trial order."""
        seen = set()
        result = []
        for strategy in self.strategies:
            candidate = strategy.candidate(key)
            if not candidate or candidate in seen:
                continue
            seen.add(candidate)
            result.append((strategy.name, candidate))
        return result

    async def resolve(self, requested_key: str) -> Optional[ResolvedObject]:
        if not requested_key or not isinstance(requested_key, str):
            return None

        tried = set()
        for name, candidate in self.candidates(requested_key):
            tried.add(candidate)
            data = await self.store.download_bytes(candidate)
            if data is not None:
                if name != "exact":
                    logger.info(
                        f"Resolved {requested_key!r} via {name} as {candidate!r}"
                    )
                return ResolvedObject(key=candidate, data=data, strategy=name)
            logger.debug(f"Miss for {requested_key!r} via {name} ({candidate!r})")

        stored_keys = await self.store.list()
        for candidate in fuzzy_matches(requested_key, stored_keys):
            if candidate in tried:
                continue
            tried.add(candidate)
            data = await self.store.download_bytes(candidate)
            if data is not None:
                logger.info(
                    f"Resolved {requested_key!r} via fuzzy match as {candidate!r}"
                )
                return ResolvedObject(key=candidate, data=data, strategy="fuzzy")
            logger.debug(f"Miss for {requested_key!r} via fuzzy ({candidate!r})")

        logger.warning(
            f"Image {requested_key!r} not found after {len(tried)} attempts"
        )
        return None

    async def resolve_bytes(self, requested_key: str) -> Optional[bytes]:
        resolved = await self.resolve(requested_key)
        return resolved.data if resolved else None
