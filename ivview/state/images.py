"""Image list state - the ordered paths and their side tables."""

from __future__ import annotations
import os
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from ..slotlist import LinkedSlotList, StableKey
from ..types import ImageMeta


@dataclass
class ImageListState:
    """Ordered image paths plus per-key facts discovered while browsing.

    Side tables are keyed by the same StableKey as the list. Rows for a key
    are dropped together with the list entry.
    """
    images: LinkedSlotList[str] = field(default_factory=LinkedSlotList)
    meta: Dict[StableKey, ImageMeta] = field(default_factory=dict)
    filenames: Dict[StableKey, str] = field(default_factory=dict)

    @property
    def count(self) -> int:
        """Total number of images."""
        return len(self.images)

    @property
    def is_empty(self) -> bool:
        return len(self.images) == 0

    def add_paths(self, paths: Iterable[str]) -> List[StableKey]:
        return self.images.extend(paths)

    def path(self, key: Optional[StableKey]) -> Optional[str]:
        return self.images.get(key)

    def filename(self, key: StableKey) -> Optional[str]:
        """Cached base name of the file, filled on first lookup."""
        name = self.filenames.get(key)
        if name is None:
            path = self.images.get(key)
            if path is None:
                return None
            name = os.path.basename(path)
            self.filenames[key] = name
        return name

    def set_meta(self, key: StableKey, meta: ImageMeta) -> bool:
        """Record meta for a live key. The first value wins."""
        if key not in self.images or key in self.meta:
            return False
        self.meta[key] = meta
        return True

    def get_meta(self, key: Optional[StableKey]) -> Optional[ImageMeta]:
        if key is None:
            return None
        return self.meta.get(key)

    def remove(self, key: StableKey) -> Optional[str]:
        """Remove an entry and all of its side-table rows."""
        self.meta.pop(key, None)
        self.filenames.pop(key, None)
        return self.images.remove(key)
