"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Business logic for residents and households: list
             filtering, household creation from a free-form address,
             membership changes, head-of-household handling and
             household statistics.
-------------------------------------------------------------------------
"""
import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Tuple

from dateutil.relativedelta import relativedelta
from django.db import transaction
from django.db.models import Count, Q, QuerySet
from django.utils import timezone

from apps.core.exceptions import RecordValidationException
from apps.core.utils import calculate_age, months_between, parse_bool, today
from apps.residents.models import (
    Household, HouseholdStatistics, HouseholdStatus, HouseholdType, Resident,
)

logger = logging.getLogger(__name__)


# Address parts in order with their defaults when missing from the string
ADDRESS_PARTS: List[Tuple[str, str]] = [
    ('house_no', 'N/A'),
    ('street', 'N/A'),
    ('barangay', 'Barangay'),
    ('city', 'City'),
    ('province', 'Province'),
    ('zip_code', '0000'),
]

AGE_GROUPS = ('child', 'young-adult', 'adult', 'senior')

SENIOR_AGE = 60
ADULT_AGE = 18


def split_address(address: str) -> Dict[str, str]:
    """
    Split a comma-separated address into household address fields.

    Example:
        >>> split_address("12, Rizal St., San Isidro")
        {'house_no': '12', 'street': 'Rizal St.', 'barangay': 'San Isidro',
         'city': 'City', 'province': 'Province', 'zip_code': '0000'}
    """
    parts = [part.strip() for part in (address or '').split(',')]
    result = {}
    for index, (field, default) in enumerate(ADDRESS_PARTS):
        value = parts[index] if index < len(parts) else ''
        result[field] = value or default
    return result


def age_group_filter(age_group: str, on_date: Optional[date] = None) -> Q:
    """
    Build a birth-date filter for an age bracket.

    Brackets: child 0-12, young-adult 13-30, adult 31-60, senior 60+.
    Unknown groups return an empty filter.
    """
    on_date = on_date or today()

    def years_ago(years: int) -> date:
        return on_date - relativedelta(years=years)

    if age_group == 'child':
        return Q(birth_date__gte=years_ago(12))
    if age_group == 'young-adult':
        return Q(birth_date__lt=years_ago(12), birth_date__gte=years_ago(30))
    if age_group == 'adult':
        return Q(birth_date__lt=years_ago(30), birth_date__gte=years_ago(60))
    if age_group == 'senior':
        return Q(birth_date__lt=years_ago(60))
    return Q()


def filter_residents(queryset: QuerySet, params: Dict[str, Any]) -> QuerySet:
    """
    Apply list filters from query parameters.

    Supported keys: search, gender, civil_status, voter, age_group,
    household.
    """
    search = (params.get('search') or '').strip()
    if search:
        queryset = queryset.filter(
            Q(first_name__icontains=search) |
            Q(last_name__icontains=search) |
            Q(middle_name__icontains=search) |
            Q(address__icontains=search)
        )

    if params.get('gender'):
        queryset = queryset.filter(gender=params['gender'])

    if params.get('civil_status'):
        queryset = queryset.filter(civil_status=params['civil_status'])

    voter = parse_bool(params.get('voter'))
    if voter is not None:
        queryset = queryset.filter(voter_in_barangay=voter)

    if params.get('age_group'):
        queryset = queryset.filter(age_group_filter(params['age_group']))

    if params.get('household'):
        queryset = queryset.filter(household_id=params['household'])

    return queryset.order_by('last_name', 'first_name')


def residency_duration(resident: Resident, on_date: Optional[date] = None) -> Dict[str, int]:
    """Whole months (and years) since the resident was registered."""
    registered_on = timezone.localtime(resident.created_at).date()
    months = max(0, months_between(registered_on, on_date or today()))
    return {'months': months, 'years': months // 12}


def append_history(household: Household, action: str, details: str, user=None) -> None:
    """Append an entry to the household's history (caller saves)."""
    entry = {
        'action': action,
        'details': details,
        'timestamp': timezone.now().isoformat(),
        'user': user.get_display_name() if user is not None and user.is_authenticated else None,
    }
    household.history = list(household.history or []) + [entry]


def recompute_household_statistics(household: Household) -> HouseholdStatistics:
    """
    Recompute and upsert the household's statistics row.

    Seniors are 60 and above, minors under 18, employed counts
    residents with an occupation.
    """
    residents = list(household.residents.all())
    ages = [calculate_age(resident.birth_date) for resident in residents]

    stats, _created = HouseholdStatistics.objects.update_or_create(
        household=household,
        defaults={
            'total_residents': len(residents),
            'voter_count': sum(1 for resident in residents if resident.voter_in_barangay),
            'senior_count': sum(1 for age in ages if age is not None and age >= SENIOR_AGE),
            'minor_count': sum(1 for age in ages if age is not None and age < ADULT_AGE),
            'employed_count': sum(1 for resident in residents if resident.occupation),
        }
    )
    return stats


def mark_as_head(household: Household, resident: Resident) -> None:
    """Clear other heads in the household and flag resident (caller saves)."""
    household.residents.exclude(pk=resident.pk).filter(
        is_head_of_household=True
    ).update(is_head_of_household=False)
    resident.is_head_of_household = True


@transaction.atomic
def create_household(data: Dict[str, Any], user=None) -> Household:
    """
    Create a household from explicit fields or a comma-separated address.

    Args:
        data: Cleaned data. Either ``address`` (split via split_address)
            or the individual address fields. Optional ``resident_ids``
            are moved into the household and ``head_of_household`` names
            the resident to mark as head.
        user: The user performing the action.

    Raises:
        RecordValidationException: If no address is given or a resident
            id does not exist.
    """
    address = (data.get('address') or '').strip()
    if address:
        fields = split_address(address)
    elif data.get('house_no') and data.get('street'):
        fields = {field: (data.get(field) or default) for field, default in ADDRESS_PARTS}
    else:
        raise RecordValidationException("Address is required.")

    household = Household(
        type=data.get('type') or HouseholdType.SINGLE_FAMILY,
        status=data.get('status') or HouseholdStatus.ACTIVE,
        latitude=data.get('latitude'),
        longitude=data.get('longitude'),
        notes=data.get('notes') or '',
        **fields
    )
    append_history(household, 'CREATED', f"Household registered at {household.full_address}", user)
    household.save_with_user(user)

    resident_ids = [rid for rid in (data.get('resident_ids') or []) if rid]
    residents = list(Resident.objects.filter(pk__in=resident_ids))
    missing = set(map(str, resident_ids)) - {str(resident.pk) for resident in residents}
    if missing:
        raise RecordValidationException(
            "Some residents were not found.",
            details={'resident_ids': sorted(missing)}
        )

    head_id = data.get('head_of_household')
    for resident in residents:
        resident.household = household
        resident.is_head_of_household = str(resident.pk) == str(head_id)
        resident.save(update_fields=['household', 'is_head_of_household', 'updated_at'])

    if residents:
        append_history(household, 'RESIDENTS_ADDED', f"{len(residents)} resident(s) assigned", user)
        household.save(update_fields=['history', 'updated_at'])

    recompute_household_statistics(household)
    logger.info("Household %s created with %d resident(s)", household.pk, len(residents))
    return household


@transaction.atomic
def add_resident_to_household(
    household: Household,
    resident: Resident,
    is_head: bool = False,
    user=None
) -> Resident:
    """
    Add a resident to a household.

    Raises:
        RecordValidationException: If the resident already belongs to
            this household.
    """
    if resident.household_id == household.pk:
        raise RecordValidationException("Resident is already a member of this household.")

    previous = resident.household
    resident.household = household
    resident.is_head_of_household = False
    if is_head:
        mark_as_head(household, resident)
    resident.save(update_fields=['household', 'is_head_of_household', 'updated_at'])

    append_history(
        household, 'RESIDENT_ADDED',
        f"{resident.full_name} added{' as head of household' if is_head else ''}", user
    )
    household.save(update_fields=['history', 'updated_at'])
    recompute_household_statistics(household)

    if previous is not None:
        append_history(previous, 'RESIDENT_TRANSFERRED', f"{resident.full_name} moved to household {household.pk}", user)
        previous.save(update_fields=['history', 'updated_at'])
        recompute_household_statistics(previous)

    return resident


@transaction.atomic
def set_head_of_household(household: Household, resident: Resident, is_head: bool = True, user=None) -> Resident:
    """
    Mark or unmark a member as head of household.

    At most one member is head; marking a new head clears the others.
    """
    if resident.household_id != household.pk:
        raise RecordValidationException("Resident is not a member of this household.")

    if is_head:
        mark_as_head(household, resident)
    else:
        resident.is_head_of_household = False
    resident.save(update_fields=['is_head_of_household', 'updated_at'])

    append_history(
        household, 'HEAD_CHANGED',
        f"{resident.full_name} {'set as' if is_head else 'removed as'} head of household", user
    )
    household.save(update_fields=['history', 'updated_at'])
    return resident


@transaction.atomic
def remove_resident_from_household(household: Household, resident: Resident, user=None) -> None:
    """Detach a resident from a household and refresh statistics."""
    if resident.household_id != household.pk:
        raise RecordValidationException("Resident is not a member of this household.")

    resident.household = None
    resident.is_head_of_household = False
    resident.save(update_fields=['household', 'is_head_of_household', 'updated_at'])

    append_history(household, 'RESIDENT_REMOVED', f"{resident.full_name} removed", user)
    household.save(update_fields=['history', 'updated_at'])
    recompute_household_statistics(household)


def refresh_households(households: Iterable[Optional[Household]]) -> None:
    """Recompute statistics for every non-null household given."""
    for household in {h.pk: h for h in households if h is not None}.values():
        recompute_household_statistics(household)


def parse_range(value: Optional[str], label: str, default_max: int) -> Tuple[int, int]:
    """
    Parse a "min-max" range such as "18-30" or "60-".

    Raises:
        RecordValidationException: If either bound is not a number.
    """
    low, _sep, high = (value or '').partition('-')
    try:
        minimum = int(low) if low.strip() else 0
        maximum = int(high) if high.strip() else default_max
    except ValueError:
        raise RecordValidationException(f"Invalid {label} range: {value}")
    return minimum, maximum


def global_search(params: Dict[str, Any], on_date: Optional[date] = None) -> Tuple[QuerySet, QuerySet]:
    """
    Search residents and households together.

    Supported keys: query (resident first/last name; household house
    no, street, barangay), barangay (exact, applied to the resident's
    household), gender, civil_status, age_range ("min-max" years) and
    household_size ("min-max" members).

    Returns:
        Tuple of (residents ordered by last name, households newest
        first).
    """
    residents = Resident.objects.select_related('household')
    households = Household.objects.annotate(resident_count=Count('residents'))

    query = (params.get('query') or '').strip()
    if query:
        residents = residents.filter(Q(first_name__icontains=query) | Q(last_name__icontains=query))
        households = households.filter(
            Q(house_no__icontains=query) |
            Q(street__icontains=query) |
            Q(barangay__icontains=query)
        )

    if params.get('barangay'):
        residents = residents.filter(household__barangay=params['barangay'])
        households = households.filter(barangay=params['barangay'])
    if params.get('gender'):
        residents = residents.filter(gender=params['gender'])
    if params.get('civil_status'):
        residents = residents.filter(civil_status=params['civil_status'])

    if params.get('age_range'):
        youngest, oldest = parse_range(params['age_range'], 'age', 200)
        on_date = on_date or today()
        residents = residents.filter(
            birth_date__gte=on_date - relativedelta(years=oldest),
            birth_date__lte=on_date - relativedelta(years=youngest),
        )

    if params.get('household_size'):
        smallest, largest = parse_range(params['household_size'], 'household size', 999)
        households = households.filter(
            resident_count__gte=max(smallest, 1),
            resident_count__lte=largest,
        )

    return residents.order_by('last_name', 'first_name'), households.order_by('-created_at')
