"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Shared helpers for age calculation, currency formatting,
             pagination, CSV responses and request parsing.
-------------------------------------------------------------------------
"""
import csv
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, Optional, Tuple

from dateutil.relativedelta import relativedelta
from django.conf import settings
from django.core.paginator import Paginator
from django.forms.models import model_to_dict
from django.http import HttpResponse
from django.utils import timezone


def today() -> date:
    """Return the current local date."""
    return timezone.localdate()


def calculate_age(birth_date: Optional[date], on_date: Optional[date] = None) -> Optional[int]:
    """
    Return the age in whole years of a person born on birth_date.

    Args:
        birth_date: Date of birth.
        on_date: Reference date (default: today).

    Returns:
        Age in years, or None when birth_date is not set.
    """
    if birth_date is None:
        return None
    return relativedelta(on_date or today(), birth_date).years


def next_in_sequence(numbers: Iterable[str]) -> int:
    """Return one past the highest numeric suffix among numbers like BLT-2026-0042."""
    highest = 0
    for number in numbers:
        suffix = (number or '').rsplit('-', 1)[-1]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return highest + 1


def months_between(start: date, end: date) -> int:
    """Return the number of whole months between two dates."""
    delta = relativedelta(end, start)
    return delta.years * 12 + delta.months


def format_currency(value: Any) -> str:
    """
    Format an amount as Philippine pesos.

    Example:
        >>> format_currency(Decimal('1234.5'))
        '₱1,234.50'
    """
    if value is None:
        value = Decimal('0')
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    sign = '-' if value < 0 else ''
    return f"{sign}₱{abs(value):,.2f}"


def money(value: Any) -> Decimal:
    """Quantize an amount, or a None aggregate, to centavos."""
    return Decimal(str(value or 0)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


def parse_bool(value: Any) -> Optional[bool]:
    """Interpret query-string style booleans ('true', '1', 'yes')."""
    if value is None or value == '':
        return None
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('true', '1', 'yes', 'on')


def percentage(part: Any, whole: Any) -> float:
    """Return part/whole as a percentage, 0 when whole is zero."""
    whole = Decimal(str(whole or 0))
    if whole == 0:
        return 0.0
    return float(Decimal(str(part or 0)) / whole * 100)


def paginate(queryset, page: Any = 1, limit: Any = None) -> Tuple[list, Dict[str, int]]:
    """
    Slice a queryset into one page.

    Args:
        queryset: Ordered queryset to paginate.
        page: 1-based page number (invalid values fall back to 1).
        limit: Page size, capped at BMS_MAX_PAGE_SIZE.

    Returns:
        Tuple of (list of objects on the page, meta dict with total,
        page, limit and pages).
    """
    try:
        limit = int(limit) if limit else settings.BMS_DEFAULT_PAGE_SIZE
    except (TypeError, ValueError):
        limit = settings.BMS_DEFAULT_PAGE_SIZE
    limit = max(1, min(limit, settings.BMS_MAX_PAGE_SIZE))

    paginator = Paginator(queryset, limit)
    page_obj = paginator.get_page(page)
    meta = {
        'total': paginator.count,
        'page': page_obj.number,
        'limit': limit,
        'pages': paginator.num_pages if paginator.count else 0,
    }
    return list(page_obj.object_list), meta


def csv_response(filename: str, rows: Iterable[Iterable[Any]]) -> HttpResponse:
    """
    Build a CSV attachment response.

    Args:
        filename: Download file name.
        rows: Iterable of rows (header included).
    """
    response = HttpResponse(content_type='text/csv')
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    writer = csv.writer(response)
    for row in rows:
        writer.writerow(row)
    return response


def merge_instance_data(instance, payload: Dict[str, Any], fields: Optional[Iterable[str]] = None) -> Dict[str, Any]:
    """
    Overlay a partial update on the instance's current field values.

    Used to feed PATCH payloads into ModelForms that expect every field.
    """
    data = model_to_dict(instance, fields=fields)
    data.update(payload)
    return data


def iso(value: Any) -> Optional[str]:
    """Serialize a date/datetime for JSON output."""
    if value is None:
        return None
    return value.isoformat()
