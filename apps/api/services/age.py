"""Age helpers."""
from datetime import date, datetime
from typing import Optional, Union


def calculate_age_at_date(
    birthdate: Optional[date],
    on_date: Optional[Union[date, datetime]] = None,
) -> Optional[int]:
    """
    Calculate age in whole years on a given date (today when omitted).
    Returns None if birthdate is not available.
    """
    if not birthdate:
        return None
    if isinstance(birthdate, datetime):
        birthdate = birthdate.date()

    if on_date is None:
        on_date = date.today()
    on_date_only = on_date.date() if isinstance(on_date, datetime) else on_date

    age = on_date_only.year - birthdate.year
    # Adjust if birthday hasn't occurred yet this year
    if (on_date_only.month, on_date_only.day) < (birthdate.month, birthdate.day):
        age -= 1

    return age
