from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.config import get_settings
from .validators import MAX_ID, clamp


@dataclass(frozen=True)
class PageWindow:
    current: int = 1
    page_size: int = 10

    @property
    def offset(self) -> int:
        return (self.current - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size


def page_window(current: Optional[int] = None, page_size: Optional[int] = None) -> PageWindow:
    """Build a window from raw query values, applying defaults and the size cap."""
    settings = get_settings()
    size = clamp(page_size if page_size is not None else settings.default_page_size, 1, settings.max_page_size)
    # OFFSET must fit a 64-bit integer.
    current = clamp(current or 1, 1, MAX_ID // size)
    return PageWindow(current=current, page_size=size)
