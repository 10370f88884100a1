"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Reporting services: the AIP report (JSON, CSV and PDF) and
             the residents, households and disaster relief CSV exports.
-------------------------------------------------------------------------
"""
import logging
from collections import OrderedDict
from decimal import Decimal
from typing import Any, Dict, Iterator, List

from dateutil.relativedelta import relativedelta
from django.db.models import Count, Prefetch, Q
from django.http import HttpResponse
from django.utils import timezone

from apps.aip.models import AIPProject, AnnualInvestmentProgram, ProjectStatus
from apps.core.models import BarangayInfo, Officials
from apps.core.pdf import render_pdf
from apps.core.utils import calculate_age, today

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')


def load_aip_for_report(pk) -> AnnualInvestmentProgram:
    """Fetch an AIP with everything the report reads."""
    projects = AIPProject.objects.select_related('budget_category').prefetch_related(
        'milestones', 'expenses'
    )
    return AnnualInvestmentProgram.objects.select_related(
        'fiscal_year', 'created_by', 'approved_by'
    ).prefetch_related(Prefetch('projects', queryset=projects)).get(pk=pk)


def _project_expenditure(project: AIPProject) -> Decimal:
    return sum((expense.amount for expense in project.expenses.all()), ZERO)


def _rate(part: Decimal, whole: Decimal) -> int:
    """Whole-number percentage, 0 when whole is zero."""
    if not whole:
        return 0
    return int(round(part / whole * 100))


def _fmt(value: Decimal) -> str:
    return f"{value:.2f}"


def _fmt_date(value) -> str:
    if not value:
        return "N/A"
    if hasattr(value, 'tzinfo') and hasattr(value, 'hour'):
        value = timezone.localtime(value)
    return value.strftime('%Y-%m-%d')


def _sectors(projects: List[AIPProject]) -> List[str]:
    # Keep first-seen order
    return list(OrderedDict.fromkeys(project.sector for project in projects))


# =====================================================================
# AIP REPORT
# =====================================================================

def monthly_expenditure(aip: AnnualInvestmentProgram, projects: List[AIPProject]) -> List[Dict[str, Any]]:
    """
    Expenditure per month across the fiscal year, keyed "Mon YYYY".

    Expenses dated outside the fiscal year are left out.
    """
    months = OrderedDict()
    current = aip.fiscal_year.start_date.replace(day=1)
    while current <= aip.fiscal_year.end_date:
        months[current.strftime('%b %Y')] = ZERO
        current += relativedelta(months=1)

    for project in projects:
        for expense in project.expenses.all():
            key = expense.date.strftime('%b %Y')
            if key in months:
                months[key] += expense.amount

    return [{'date': key, 'amount': str(amount)} for key, amount in months.items()]


def aip_report_data(aip: AnnualInvestmentProgram) -> Dict[str, Any]:
    """
    Build the AIP report.

    Returns:
        Dict with summary, projects_by_status (non-zero counts only),
        projects_by_sector, budget_utilization and expenditure_timeline.
    """
    projects = list(aip.projects.all())
    expenditure_by_project = {project.pk: _project_expenditure(project) for project in projects}
    total_expenditure = sum(expenditure_by_project.values(), ZERO)

    status_counts = {
        status: sum(1 for project in projects if project.status == status)
        for status in ProjectStatus.values
    }

    projects_by_sector = []
    for sector in _sectors(projects):
        sector_projects = [project for project in projects if project.sector == sector]
        projects_by_sector.append({
            'sector': sector,
            'budget': str(sum((p.total_cost for p in sector_projects), ZERO)),
            'expenditure': str(sum((expenditure_by_project[p.pk] for p in sector_projects), ZERO)),
            'project_count': len(sector_projects),
        })

    categorized = [project for project in projects if project.budget_category_id]
    category_names = list(OrderedDict.fromkeys(p.budget_category.name for p in categorized))
    budget_utilization = []
    for name in category_names:
        category_projects = [p for p in categorized if p.budget_category.name == name]
        budget_utilization.append({
            'category': name,
            'allocated': str(sum((p.total_cost for p in category_projects), ZERO)),
            'utilized': str(sum((expenditure_by_project[p.pk] for p in category_projects), ZERO)),
        })
    if not budget_utilization:
        budget_utilization.append({
            'category': 'Total',
            'allocated': str(aip.total_amount),
            'utilized': str(total_expenditure),
        })

    return {
        'summary': {
            'id': aip.pk,
            'title': aip.title,
            'status': aip.status,
            'total_amount': str(aip.total_amount),
            'fiscal_year': aip.fiscal_year.year,
            'project_count': len(projects),
            'expenditure_amount': str(total_expenditure),
            'completed_projects': status_counts[ProjectStatus.COMPLETED],
            'ongoing_projects': status_counts[ProjectStatus.ONGOING],
            'planned_projects': status_counts[ProjectStatus.PLANNED],
            'delayed_projects': status_counts[ProjectStatus.DELAYED],
            'cancelled_projects': status_counts[ProjectStatus.CANCELLED],
        },
        'projects_by_status': [
            {'status': status, 'count': count} for status, count in status_counts.items() if count
        ],
        'projects_by_sector': projects_by_sector,
        'budget_utilization': budget_utilization,
        'expenditure_timeline': monthly_expenditure(aip, projects),
    }


def _user_name(user) -> str:
    return user.get_full_name() or user.email


def aip_report_rows(aip: AnnualInvestmentProgram) -> Iterator[List[Any]]:
    """Yield the rows of the AIP CSV report, section by section."""
    projects = list(aip.projects.all())
    expenditure_by_project = {project.pk: _project_expenditure(project) for project in projects}
    total_expenditure = sum(expenditure_by_project.values(), ZERO)
    total_projects = len(projects)

    yield ["ANNUAL INVESTMENT PROGRAM REPORT"]
    yield [f"Generated on: {today().isoformat()}"]
    yield []

    yield ["1. AIP SUMMARY"]
    yield ["Field", "Value"]
    yield ["Title", aip.title]
    yield ["Fiscal Year", aip.fiscal_year.year]
    yield ["Status", aip.status]
    yield ["Total Budget", _fmt(aip.total_amount)]
    yield ["Created By", _user_name(aip.created_by) if aip.created_by_id else "N/A"]
    yield ["Created Date", _fmt_date(aip.created_at)]
    yield ["Approved By", _user_name(aip.approved_by) if aip.approved_by_id else "Not Approved"]
    yield ["Approved Date", _fmt_date(aip.approved_date) if aip.approved_date else "Not Approved"]
    yield ["Description", aip.description]
    yield []

    yield ["PROJECT STATUS OVERVIEW"]
    yield ["Status", "Count", "Percentage"]
    for label, status in (
        ("Completed", ProjectStatus.COMPLETED),
        ("Ongoing", ProjectStatus.ONGOING),
        ("Planned", ProjectStatus.PLANNED),
    ):
        count = sum(1 for project in projects if project.status == status)
        yield [label, count, f"{_rate(Decimal(count), Decimal(total_projects))}%"]
    yield ["Total", total_projects, "100%"]
    yield []

    yield ["BUDGET UTILIZATION"]
    yield ["Category", "Value"]
    yield ["Total Budget", _fmt(aip.total_amount)]
    yield ["Total Expenditure", _fmt(total_expenditure)]
    yield ["Remaining Budget", _fmt(aip.total_amount - total_expenditure)]
    yield ["Utilization Rate", f"{_rate(total_expenditure, aip.total_amount)}%"]
    yield []

    yield ["2. PROJECTS OVERVIEW"]
    yield ["Project Code", "Title", "Sector", "Budget", "Expenditure", "Status", "Progress", "Start Date", "End Date"]
    for project in projects:
        yield [
            project.project_code,
            project.title,
            project.sector,
            _fmt(project.total_cost),
            _fmt(expenditure_by_project[project.pk]),
            project.status,
            f"{project.progress}%",
            _fmt_date(project.start_date),
            _fmt_date(project.end_date),
        ]
    yield []

    yield ["BUDGET ALLOCATION BY SECTOR"]
    yield ["Sector", "Projects", "Budget", "Expenditure", "Utilization Rate"]
    for sector in _sectors(projects):
        sector_projects = [project for project in projects if project.sector == sector]
        budget = sum((p.total_cost for p in sector_projects), ZERO)
        expenditure = sum((expenditure_by_project[p.pk] for p in sector_projects), ZERO)
        yield [sector, len(sector_projects), _fmt(budget), _fmt(expenditure), f"{_rate(expenditure, budget)}%"]
    yield []

    yield ["3. PROJECT DETAILS"]
    for project in projects:
        yield [f"PROJECT: {project.title} ({project.project_code})"]
        yield ["Field", "Value"]
        yield ["Sector", project.sector]
        yield ["Status", project.status]
        yield ["Budget", _fmt(project.total_cost)]
        yield ["Location", project.location or "N/A"]
        yield ["Start Date", _fmt_date(project.start_date)]
        yield ["End Date", _fmt_date(project.end_date)]
        yield ["Progress", f"{project.progress}%"]
        yield ["Fund Source", project.fund_source or "N/A"]
        yield ["Budget Category", project.budget_category.name if project.budget_category_id else "Uncategorized"]
        yield ["Description", project.description]
        yield []

        milestones = list(project.milestones.all())
        if milestones:
            yield ["MILESTONES"]
            yield ["Title", "Status", "Due Date", "Completed Date"]
            for milestone in milestones:
                yield [
                    milestone.title,
                    milestone.status,
                    _fmt_date(milestone.due_date),
                    _fmt_date(milestone.completed_at) if milestone.completed_at else "Not Completed",
                ]
            yield []

        expenses = list(project.expenses.all())
        if expenses:
            spent = expenditure_by_project[project.pk]
            yield ["EXPENSES"]
            yield ["Date", "Description", "Amount", "Reference"]
            for expense in expenses:
                yield [_fmt_date(expense.date), expense.description, _fmt(expense.amount), expense.reference or "N/A"]
            yield []
            yield ["Total Expenses", _fmt(spent)]
            yield ["Remaining Budget", _fmt(project.total_cost - spent)]
            yield ["Budget Utilization", f"{_rate(spent, project.total_cost)}%"]

        yield []
        yield []


def generate_aip_report_pdf(aip: AnnualInvestmentProgram, request=None) -> HttpResponse:
    """Render the AIP report as a PDF."""
    report = aip_report_data(aip)
    projects = []
    for project in aip.projects.all():
        spent = _project_expenditure(project)
        projects.append({
            'project': project,
            'expenditure': spent,
            'utilization': _rate(spent, project.total_cost),
        })

    context = {
        'aip': aip,
        'report': report,
        'projects': projects,
        'total_expenditure': Decimal(report['summary']['expenditure_amount']),
        'remaining': aip.total_amount - Decimal(report['summary']['expenditure_amount']),
        'barangay_info': BarangayInfo.load(),
        'officials': Officials.load(),
        'generated_on': timezone.localtime(),
    }
    logger.info("Generating AIP report PDF for AIP %s", aip.pk)
    return render_pdf(
        'reporting/aip_report_pdf.html',
        context,
        filename=f"aip-report-{aip.fiscal_year.year}.pdf",
        request=request
    )


# =====================================================================
# RESIDENT, HOUSEHOLD AND RELIEF REPORTS
# =====================================================================

def filter_residents(queryset, term: str):
    """Match first/last name or the household's house no, street or barangay."""
    if not term:
        return queryset
    return queryset.filter(
        Q(first_name__icontains=term) |
        Q(last_name__icontains=term) |
        Q(household__house_no__icontains=term) |
        Q(household__street__icontains=term) |
        Q(household__barangay__icontains=term)
    )


def filter_households(queryset, term: str):
    if not term:
        return queryset
    return queryset.filter(
        Q(house_no__icontains=term) | Q(street__icontains=term) | Q(barangay__icontains=term)
    )


def resident_report_rows(residents) -> Iterator[List[Any]]:
    yield [
        "Last Name", "First Name", "Gender", "Birth Date", "Age", "Civil Status",
        "Contact No", "House No", "Street", "Barangay",
    ]
    for resident in residents:
        household = resident.household
        yield [
            resident.last_name,
            resident.first_name,
            resident.gender,
            resident.birth_date.isoformat(),
            calculate_age(resident.birth_date),
            resident.civil_status,
            resident.contact_no,
            household.house_no if household else "",
            household.street if household else "",
            household.barangay if household else "",
        ]


def household_report_rows(households) -> Iterator[List[Any]]:
    """Households must be annotated with resident_count."""
    yield [
        "House No", "Street", "Barangay", "City", "Province", "ZIP Code",
        "Total Residents", "Mapped", "Created At",
    ]
    for household in households:
        yield [
            household.house_no,
            household.street,
            household.barangay,
            household.city,
            household.province,
            household.zip_code,
            household.resident_count,
            "Yes" if household.is_mapped else "No",
            _fmt_date(household.created_at),
        ]


def annotate_resident_count(queryset):
    return queryset.annotate(resident_count=Count('residents'))


def relief_report_rows(records, detailed: bool = False) -> Iterator[List[Any]]:
    """
    Rows of the disaster relief report.

    The summary lists the resident's name and address; the detailed
    report adds personal details and the full household address.
    """
    if detailed:
        yield [
            "Date", "Type", "Amount", "Status", "First Name", "Middle Name", "Last Name",
            "Gender", "Birth Date", "Civil Status", "Contact No", "House Number", "Street",
            "Barangay", "City", "Province", "Zip Code", "Notes",
        ]
    else:
        yield [
            "Date", "Type", "Amount", "Status", "Resident Name", "House Number", "Street",
            "Barangay", "Notes",
        ]

    for record in records:
        resident = record.resident
        household = resident.household
        address = {
            field: getattr(household, field) if household else ""
            for field in ('house_no', 'street', 'barangay', 'city', 'province', 'zip_code')
        }
        common = [record.created_at.isoformat(), record.type, str(record.amount), record.status]
        if detailed:
            yield common + [
                resident.first_name,
                resident.middle_name,
                resident.last_name,
                resident.gender,
                resident.birth_date.isoformat(),
                resident.civil_status,
                resident.contact_no,
                address['house_no'],
                address['street'],
                address['barangay'],
                address['city'],
                address['province'],
                address['zip_code'],
                record.notes,
            ]
        else:
            yield common + [
                f"{resident.first_name} {resident.last_name}",
                address['house_no'],
                address['street'],
                address['barangay'],
                record.notes,
            ]
