"""Stack frame data model."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class StackFrame:
    """Single frame tokenized from a captured stack trace."""

    file_name: Optional[str]
    line_number: Optional[int]
    column_number: Optional[int]
    function_name: Optional[str] = None
    source: Optional[str] = None  # raw stack line
