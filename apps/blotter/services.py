"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Blotter services: case numbering, filing, status changes,
             filing fee payment, Certification to File Action and the
             case report documents.
-------------------------------------------------------------------------
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from django.conf import settings
from django.db import transaction
from django.http import HttpResponse
from django.utils import timezone

from apps.core.exceptions import InvalidStateException, RecordValidationException
from apps.core.models import BarangayInfo, Officials
from apps.core.pdf import render_pdf
from apps.core.utils import next_in_sequence, today
from apps.certificates.services import format_long_date
from apps.blotter.logging import BlotterLogger
from apps.blotter.models import (
    BlotterCase, BlotterCaseStatus, BlotterParty, BlotterStatusUpdate, PartyType,
)

logger = logging.getLogger(__name__)


# Optional fields a status update may carry
STATUS_UPDATE_FIELDS = (
    'filing_fee', 'filing_fee_paid', 'docket_date', 'summon_date',
    'mediation_start_date', 'mediation_end_date',
    'conciliation_start_date', 'conciliation_end_date',
    'extension_date', 'certification_date',
    'resolution_method', 'escalated_to',
)

CFA_STATEMENTS = (
    "There was a personal confrontation between the parties before the Punong Barangay "
    "but mediation failed;",
    "The Punong Barangay set the meeting of parties for potential settlement;",
    "After the lapse of the fifteen (15)-day period from date of mediation session, "
    "no settlement has been reached;",
    "Therefore, as provided under the Revised Katarungang Pambarangay Law (RA 7160), the "
    "corresponding complaint for the dispute may now be filed in court/government office.",
)

STATUS_SUMMARIES = {
    BlotterCaseStatus.PENDING: 'The case is awaiting initial action and scheduling for mediation.',
    BlotterCaseStatus.RESOLVED: (
        'The parties have reached an agreement and the case has been successfully resolved.'
    ),
    BlotterCaseStatus.ESCALATED: (
        'Due to inability to reach a settlement at the barangay level, this case has been '
        'escalated to the appropriate municipal/city authority.'
    ),
}


def generate_case_number(year: Optional[int] = None) -> str:
    """
    Generate the next case number for a year.

    Format: BLT-YYYY-NNNN where NNNN is sequential within the year.
    """
    year = year or today().year
    prefix = f"{settings.BMS_BLOTTER_PREFIX}-{year}-"

    numbers = BlotterCase.objects.select_for_update().filter(
        case_number__startswith=prefix
    ).values_list('case_number', flat=True)
    counter = next_in_sequence(numbers)
    return f"{prefix}{counter:04d}"


def record_status_update(case: BlotterCase, status: str, notes: str, user=None) -> BlotterStatusUpdate:
    return BlotterStatusUpdate.objects.create(
        case=case,
        status=status,
        notes=notes,
        updated_by=user if getattr(user, 'is_authenticated', False) else None
    )


@transaction.atomic
def create_case(case: BlotterCase, parties: Iterable[BlotterParty], user=None) -> BlotterCase:
    """
    File a new complaint.

    Args:
        case: Unsaved case built from the submitted form.
        parties: Unsaved parties; at least one complainant and one
            respondent are required.

    Raises:
        RecordValidationException: If a complainant or respondent is missing.
    """
    parties = list(parties)
    party_types = {party.party_type for party in parties}
    if PartyType.COMPLAINANT not in party_types or PartyType.RESPONDENT not in party_types:
        raise RecordValidationException(
            "At least one complainant and one respondent are required.",
            details={'parties': [str(party_type) for party_type in party_types]}
        )

    case.case_number = generate_case_number()
    case.status = BlotterCaseStatus.FILED
    case.save_with_user(user)

    for party in parties:
        party.case = case
        if party.resident_id:
            party.is_resident = True
        party.save()

    record_status_update(case, case.status, f"Case {case.case_number} filed and registered.", user)
    BlotterLogger.log_case_filed(case, user)
    return case


@transaction.atomic
def update_status(case: BlotterCase, status: str, user=None, remarks: str = '',
                  fields: Optional[Dict[str, Any]] = None) -> BlotterCase:
    """
    Set a new status and the optional fee, date and resolution fields.

    Raises:
        RecordValidationException: If the status is unknown.
    """
    if status not in BlotterCaseStatus.values:
        raise RecordValidationException("Invalid status provided", details={'status': status})

    previous = case.status
    case.status = status
    for name, value in (fields or {}).items():
        if name in STATUS_UPDATE_FIELDS:
            setattr(case, name, value)
    case.save_with_user(user)

    notes = remarks or f"Case status updated to {status}"
    record_status_update(case, status, notes, user)
    BlotterLogger.log_status_changed(case, previous, user, notes)
    return case


@transaction.atomic
def mark_filing_fee_paid(case: BlotterCase, user=None) -> BlotterCase:
    """Record the filing fee; a FILED case moves on to the docket."""
    previous = case.status
    case.filing_fee_paid = True
    if case.status == BlotterCaseStatus.FILED:
        case.status = BlotterCaseStatus.DOCKETED
        case.docket_date = today()
        notes = "Filing fee has been paid. Case is now docketed."
    else:
        notes = "Filing fee has been marked as paid. Case status remains unchanged."
    case.save_with_user(user)

    record_status_update(case, case.status, notes, user)
    if previous != case.status:
        BlotterLogger.log_status_changed(case, previous, user, notes)
    return case


@transaction.atomic
def issue_cfa(case: BlotterCase, user=None) -> BlotterCase:
    """
    Certify the case for filing in court.

    EXTENDED cases become CERTIFIED; CERTIFIED cases get the document
    again without another status entry.

    Raises:
        InvalidStateException: For any other status.
    """
    if case.status == BlotterCaseStatus.CERTIFIED:
        BlotterLogger.log_cfa_issued(case, user, reissued=True)
        return case

    if case.status != BlotterCaseStatus.EXTENDED:
        raise InvalidStateException(
            "Case must be in EXTENDED status to issue a CFA or CERTIFIED to download it",
            details={'status': case.status}
        )

    previous = case.status
    case.status = BlotterCaseStatus.CERTIFIED
    case.certification_date = today()
    case.save_with_user(user)

    notes = "Certification to File Action (CFA) has been issued."
    record_status_update(case, case.status, notes, user)
    BlotterLogger.log_status_changed(case, previous, user, notes)
    BlotterLogger.log_cfa_issued(case, user)
    return case


def _names(parties: List[BlotterParty]) -> str:
    return ', '.join(party.full_name for party in parties) or 'Unknown'


def summarize_description(description: str) -> str:
    """First sentence of the description, cut at 150 characters."""
    first_sentence = description.split('.')[0]
    if len(first_sentence) > 150:
        return first_sentence[:150] + '...'
    return first_sentence


def status_summary(case: BlotterCase) -> str:
    if not case.status_updates.exists():
        return ''
    if case.status == BlotterCaseStatus.ONGOING:
        hearing = case.hearings.order_by('-date').first()
        text = 'Mediation proceedings are currently in progress.'
        if hearing:
            text += f" The most recent hearing was held on {format_long_date(hearing.date)}."
        return text
    return STATUS_SUMMARIES.get(case.status, '')


def case_summary(case: BlotterCase) -> List[str]:
    """
    Narrative paragraphs for the "Facts of the Case" section.

    Returns:
        List of paragraphs.
    """
    incident_time = case.incident_time.strftime('%I:%M %p') if case.incident_time else 'an unspecified time'
    facts = (
        f"This case involves a {case.incident_type.lower()} incident that occurred on "
        f"{format_long_date(case.incident_date)} at {incident_time} in {case.incident_location}. "
        f"The complainant, {_names(case.complainants)}, reported that the respondent, "
        f"{_names(case.respondents)}, {summarize_description(case.incident_description)}."
    )
    progress = (
        f"The case was filed on {format_long_date(timezone.localdate(case.report_date))} and is currently "
        f"marked as {case.status.lower()} with {case.priority.lower()} priority. {status_summary(case)}"
    ).strip()
    law = (
        "The barangay is actively handling this case in accordance with the Katarungang "
        "Pambarangay Law (Republic Act No. 7160), which mandates that certain disputes between "
        "residents of the same barangay be brought for amicable settlement before the Lupong "
        "Tagapamayapa."
    )
    return [facts, progress, law]


def _document_context(case: BlotterCase) -> Dict[str, Any]:
    officials = Officials.load()
    return {
        'case': case,
        'barangay_info': BarangayInfo.load(),
        'officials': officials,
        'complainants': case.complainants,
        'respondents': case.respondents,
        'witnesses': case.witnesses,
        'punong_barangay': (officials.punong_barangay or '').upper(),
    }


def generate_cfa_pdf(case: BlotterCase, request=None) -> HttpResponse:
    """Render the Certification to File Action."""
    context = _document_context(case)
    context.update({
        'statements': CFA_STATEMENTS,
        'issued_on': format_long_date(case.certification_date or today()),
    })
    return render_pdf(
        'blotter/cfa_pdf.html',
        context,
        filename=f"{case.case_number}-certification.pdf",
        request=request
    )


def generate_case_report_pdf(case: BlotterCase, request=None) -> HttpResponse:
    """Render the official blotter report of a case."""
    context = _document_context(case)
    context.update({
        'summary': case_summary(case),
        'hearings': case.hearings.all(),
        'status_updates': case.status_updates.select_related('updated_by'),
        'generated_on': format_long_date(today()),
    })
    return render_pdf(
        'blotter/case_report_pdf.html',
        context,
        filename=f"{case.case_number}-report.pdf",
        request=request
    )
