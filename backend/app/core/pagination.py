from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def page_request(page: Optional[int], limit: Optional[int], default_limit: int = 20, max_limit: int = 100) -> PageRequest:
    """Page defaults to 1; limit defaults to default_limit and is clamped to [1, max_limit]."""
    page = page if page and page > 0 else 1
    limit = default_limit if limit is None else limit
    return PageRequest(page=page, limit=max(1, min(limit, max_limit)))
