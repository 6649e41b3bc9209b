# File: community_action/services/listing.py

"""
Search / filter / sort over the in-memory project list.

The listing page fetches every project once per request and derives the
visible subset with :func:`recompute`.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from community_action.schemas.project import ProjectRead, ProjectType

ALL_TYPES = "all"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def toggled(self) -> "SortOrder":
        return SortOrder.ASC if self is SortOrder.DESC else SortOrder.DESC


def _matches(project: ProjectRead, needle: str) -> bool:
    return (
        needle in project.title.lower()
        or needle in project.description.lower()
        or needle in project.location.lower()
    )


def recompute(
    all_projects: Iterable[ProjectRead],
    search_term: str = "",
    type_filter: str = ALL_TYPES,
    sort_order: SortOrder = SortOrder.DESC,
) -> List[ProjectRead]:
    """
    Return the visible projects: substring search on title, description or
    location (case-insensitive), then the type filter, then a stable sort by
    votes. Does not mutate its input.
    """
    visible = list(all_projects)

    needle = (search_term or "").lower()
    if needle:
        visible = [p for p in visible if _matches(p, needle)]

    if type_filter != ALL_TYPES:
        visible = [p for p in visible if p.type == type_filter]

    return sorted(visible, key=lambda p: p.votes, reverse=SortOrder(sort_order) is SortOrder.DESC)


@dataclass(frozen=True)
class ViewState:
    search_term: str = ""
    type_filter: str = ALL_TYPES
    sort_order: SortOrder = SortOrder.DESC

    @classmethod
    def from_query(
        cls,
        q: Optional[str] = None,
        type: Optional[str] = None,
        sort: Optional[str] = None,
    ) -> "ViewState":
        type_filter = type if type in ProjectType.values() else ALL_TYPES
        try:
            sort_order = SortOrder(sort) if sort else SortOrder.DESC
        except ValueError:
            sort_order = SortOrder.DESC
        return cls(search_term=q or "", type_filter=type_filter, sort_order=sort_order)

    def apply(self, all_projects: Iterable[ProjectRead]) -> List[ProjectRead]:
        return recompute(all_projects, self.search_term, self.type_filter, self.sort_order)

    def query_params(self, **overrides) -> dict:
        params = {
            "q": self.search_term,
            "type": self.type_filter,
            "sort": self.sort_order.value,
        }
        params.update(overrides)
        return {k: v for k, v in params.items() if v}
