"""Source location data model."""

from dataclasses import dataclass
from typing import Iterator, Optional


@dataclass
class SourceLocation:
    """Location of a rendered element in the original source code."""

    file: str
    line: int  # 1-based
    column: int  # 0-based
    component_name: Optional[str] = None
    tag_name: Optional[str] = None
    source_code: Optional[str] = None
    parent: Optional["SourceLocation"] = None

    @property
    def location_str(self) -> str:
        """Return file:line:column string."""
        return f"{self.file}:{self.line}:{self.column}"

    def is_valid(self) -> bool:
        return validate_source_location(self)

    def chain(self) -> Iterator["SourceLocation"]:
        """Iterate over the ancestor locations, nearest first."""
        current = self.parent
        while current is not None:
            yield current
            current = current.parent

    @property
    def depth(self) -> int:
        """Number of ancestors linked through ``parent``."""
        return sum(1 for _ in self.chain())


def validate_source_location(location: Optional[SourceLocation]) -> bool:
    """Check the file/line/column validity rule.

    A valid location has a non-blank file, a positive line and a
    non-negative column.
    """
    if location is None:
        return False
    return bool(
        location.file
        and location.file.strip() != ""
        and location.line > 0
        and location.column >= 0
    )
