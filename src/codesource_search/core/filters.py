"""Facet filters merged into every remote query."""

from collections.abc import Iterator, Mapping
from types import MappingProxyType

FACETS: tuple[str, ...] = ("contentType", "language", "dateRange", "level")

# Values offered by the filter panel, per facet.
FACET_CHOICES: dict[str, tuple[str, ...]] = {
    "contentType": ("articles", "tutorials", "code snippets", "discussions", "projects"),
    "language": ("javascript", "typescript", "python", "java", "csharp", "cpp", "go", "ruby"),
    "dateRange": ("last_week", "last_month", "last_year", "all_time"),
    "level": ("beginner", "intermediate", "advanced"),
}


def _check_facet(facet: str) -> None:
    if facet not in FACETS:
        msg = f"unknown facet {facet!r}, expected one of {FACETS!r}"
        raise ValueError(msg)


class FilterSet:
    """Mutable facet -> value mapping. A missing facet means unfiltered.

    Queries never hold a reference to this object, only to ``snapshot()``,
    so later mutations cannot leak into requests already dispatched.
    """

    def __init__(self, values: Mapping[str, str | None] | None = None) -> None:
        self._values: dict[str, str] = {}
        for facet, value in (values or {}).items():
            self.set(facet, value)

    def __repr__(self) -> str:
        return f"FilterSet({self._values!r})"

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FilterSet):
            return self._values == other._values
        return NotImplemented

    @property
    def active(self) -> bool:
        """True when at least one facet is set."""
        return bool(self._values)

    def get(self, facet: str) -> str | None:
        _check_facet(facet)
        return self._values.get(facet)

    def set(self, facet: str, value: str | None) -> None:
        """Set a facet; None or an empty string clears it."""
        _check_facet(facet)
        if value:
            self._values[facet] = value
        else:
            self._values.pop(facet, None)

    def toggle(self, facet: str, value: str) -> None:
        """Select ``value``, or clear the facet if it is already selected."""
        if self.get(facet) == value:
            self.set(facet, None)
        else:
            self.set(facet, value)

    def update(self, values: Mapping[str, str | None]) -> None:
        for facet, value in values.items():
            self.set(facet, value)

    def reset(self) -> None:
        self._values.clear()

    def snapshot(self) -> Mapping[str, str]:
        """Read-only copy in facet order."""
        return MappingProxyType({f: self._values[f] for f in FACETS if f in self._values})
