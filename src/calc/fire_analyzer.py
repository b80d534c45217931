import datetime
from typing import Iterable, Mapping, Optional, Union

from model.ProjectionData import FireStats, ProjectionRow


def _row_fields(row: Union[ProjectionRow, Mapping]):
    if isinstance(row, Mapping):
        return row['year'], bool(row.get('fireReached', row.get('fire_reached', False)))
    return row.year, row.fire_reached


def calculate_fire_stats(rows: Iterable[Union[ProjectionRow, Mapping]], current_age: int,
                         current_year: Optional[int] = None) -> Optional[FireStats]:
    """Summarize the first projection year in which FIRE is reached.

    Args:
        rows: Chronological projection rows, either ProjectionRow values or
              mappings with 'year' and 'fireReached' keys
        current_age: Age of the person today
        current_year: Calendar year treated as "now"; defaults to the
                      wall-clock year, not the projection's start year

    Returns:
        FireStats for the earliest row with FIRE reached, or None if no row
        reaches it
    """
    for row in rows:
        year, reached = _row_fields(row)
        if reached:
            if current_year is None:
                current_year = datetime.date.today().year
            years_to_fire = year - current_year
            return FireStats(
                fire_year=year,
                fire_age=current_age + years_to_fire,
                years_to_fire=years_to_fire
            )
    return None
