"""Field metadata for projection and investment rows.

Short names are used as column headers in tables and by the MCP search tool;
descriptions explain each field to the user.
"""

from dataclasses import dataclass
from typing import Dict, List

@dataclass
class FieldInfo:
    """Metadata for a single field."""
    short_name: str  # Column header (unique, concise)
    description: str  # Full description of the field

FIELD_METADATA: Dict[str, FieldInfo] = {
    # ProjectionRow
    "year": FieldInfo("Year", "Calendar year"),
    "wealth": FieldInfo("Wealth", "End-of-year net worth after real growth, savings and expenses"),
    "expenses": FieldInfo("Expenses", "Annual expenses for the year after expense growth"),
    "fire_number": FieldInfo("FIRE Number", "Wealth needed to retire (25x annual expenses, 4% rule)"),
    "fire_reached": FieldInfo("FIRE Reached", "True if wealth is at or above the FIRE number"),

    # Investment rows
    "age": FieldInfo("Age", "Age at the end of the year"),
    "contributions": FieldInfo("Contributions", "Monthly and annual contributions made during the year"),
    "returns": FieldInfo("Returns", "Investment returns earned during the year"),
    "balance": FieldInfo("Balance", "End-of-year portfolio balance"),
    "total_contributed": FieldInfo("Total Contributed", "Starting amount plus all contributions so far"),
    "total_gains": FieldInfo("Total Gains", "Balance minus total contributed"),
}

def get_short_name(field_name: str) -> str:
    """Get the short name for a field, or the field name if not found."""
    info = FIELD_METADATA.get(field_name)
    return info.short_name if info else field_name

def get_description(field_name: str) -> str:
    info = FIELD_METADATA.get(field_name)
    return info.description if info else ""

def wrap_header(text: str, max_width: int) -> List[str]:
    """Wrap a header into lines no wider than max_width, splitting on spaces.

    A single word longer than max_width is kept on its own line.
    """
    if len(text) <= max_width:
        return [text]

    lines = []
    current_line = ""
    for word in text.split():
        if not current_line:
            current_line = word
        elif len(current_line) + 1 + len(word) <= max_width:
            current_line += " " + word
        else:
            lines.append(current_line)
            current_line = word

    if current_line:
        lines.append(current_line)
    return lines
