"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Rule-based AIP advisor. Budget, project and risk
             recommendations, and the per-AIP insight data sets.
-------------------------------------------------------------------------
"""
import logging
from collections import OrderedDict
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Dict, List, Optional

from dateutil.relativedelta import relativedelta
from django.utils import timezone

from apps.aip.models import AIPProject, AnnualInvestmentProgram, MilestoneStatus, ProjectStatus
from apps.core.utils import today

logger = logging.getLogger(__name__)

SOURCE = 'rule-based-v1'
CATEGORIES = ('budget', 'project', 'risk')

LOW_UTILIZATION_RATE = Decimal('30')
HIGH_UTILIZATION_RATE = Decimal('90')
SECTOR_CONCENTRATION_RATE = Decimal('50')
HIGH_VALUE_SHARE = Decimal('0.25')
DEADLINE_WINDOW_DAYS = 30
PEAK_MONTH_THRESHOLD = 5

GENERAL_RECOMMENDATIONS = {
    'budget': [
        "Ensure at least 20% of AIP budget is allocated to health and social services",
        "Consider historical spending patterns from previous fiscal years when planning new budget allocations",
        "Allocate a small contingency budget (5-10%) for unexpected expenses",
    ],
    'project': [
        "Maintain a balanced portfolio of short-term and long-term projects",
        "Set clear milestones for all projects to better track progress",
        "Consider community input when prioritizing new projects",
    ],
    'risk': [
        "Diversify funding sources to mitigate financial risks",
        "Identify and document potential risks for each project during planning phase",
        "Perform regular risk assessments throughout project lifecycle",
    ],
}


def recommendation(message: str, kind: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {'message': message, 'type': kind, 'data': data or {}}


def round_half_up(value) -> int:
    return int(Decimal(str(value)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def _rate_label(value: Decimal) -> str:
    return f"{value.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)}%"


# =====================================================================
# RECOMMENDATIONS
# =====================================================================

def budget_recommendations(aip: AnnualInvestmentProgram) -> List[Dict[str, Any]]:
    """
    Utilization below 30% is critical, above 90% a warning; a sector
    holding more than half of the allocated project cost is flagged.
    """
    projects = list(aip.projects.all())
    results = []

    spent = sum((expense.amount for p in projects for expense in p.expenses.all()), Decimal('0'))
    utilization = spent / aip.total_amount * 100 if aip.total_amount else Decimal('0')
    if utilization < LOW_UTILIZATION_RATE:
        results.append(recommendation(
            "Budget utilization is significantly below expected levels. Consider accelerating "
            "project implementation or reallocating funds to high-priority areas.",
            'critical',
            {'utilization_rate': _rate_label(utilization)}
        ))
    elif utilization > HIGH_UTILIZATION_RATE:
        results.append(recommendation(
            "Budget utilization is nearing capacity. Monitor expenses closely to avoid overruns.",
            'warning',
            {'utilization_rate': _rate_label(utilization)}
        ))

    sectors = OrderedDict()
    for project in projects:
        sector = project.sector or 'Uncategorized'
        sectors[sector] = sectors.get(sector, Decimal('0')) + project.total_cost
    allocated = sum(sectors.values(), Decimal('0'))
    for sector, amount in sectors.items():
        share = amount / allocated * 100
        if share > SECTOR_CONCENTRATION_RATE:
            results.append(recommendation(
                f"{sector} sector accounts for {_rate_label(share)} of the budget. "
                f"Consider diversifying investments across more sectors.",
                'suggestion',
                {'sector': sector, 'percentage': _rate_label(share)}
            ))
    return results


def project_recommendations(aip: AnnualInvestmentProgram, on_date: Optional[date] = None) -> List[Dict[str, Any]]:
    on_date = on_date or today()
    projects = list(aip.projects.all())
    results = []

    delayed = [p for p in projects if p.status == ProjectStatus.DELAYED]
    if delayed:
        results.append(recommendation(
            f"{len(delayed)} project(s) are currently delayed. Consider reviewing these projects "
            f"to identify common bottlenecks.",
            'critical',
            {'count': len(delayed)}
        ))

    open_projects = [p for p in projects if p.status != ProjectStatus.COMPLETED]
    missing_milestones = [p for p in open_projects if not p.milestones.all()]
    if missing_milestones:
        results.append(recommendation(
            f"{len(missing_milestones)} project(s) don't have defined milestones. "
            f"Add milestones to better track progress.",
            'warning',
            {'count': len(missing_milestones)}
        ))

    nearing = [p for p in open_projects if (p.end_date - on_date).days <= DEADLINE_WINDOW_DAYS]
    if nearing:
        results.append(recommendation(
            f"{len(nearing)} project(s) are nearing their deadlines (within 30 days). "
            f"Ensure they are on track for completion.",
            'warning',
            {'count': len(nearing)}
        ))
    return results


def active_month_counts(projects: List[AIPProject]) -> List[int]:
    """
    Count, per calendar month (index 0 = January), the projects active
    in that month. A project spanning a year end counts in every month
    it covers, each month at most once.
    """
    counts = [0] * 12
    for project in projects:
        months = set()
        current = project.start_date.replace(day=1)
        while current <= project.end_date and len(months) < 12:
            months.add(current.month - 1)
            current += relativedelta(months=1)
        for month in months:
            counts[month] += 1
    return counts


def risk_recommendations(aip: AnnualInvestmentProgram) -> List[Dict[str, Any]]:
    projects = list(aip.projects.all())
    results = []

    high_value = [p for p in projects if p.total_cost > aip.total_amount * HIGH_VALUE_SHARE]
    if high_value:
        results.append(recommendation(
            f"{len(high_value)} project(s) represent more than 25% of total budget each. "
            f"Consider splitting these into smaller phases to reduce risk.",
            'warning',
            {'count': len(high_value)}
        ))

    counts = active_month_counts(projects)
    # First month wins ties
    peak = max(range(12), key=lambda index: (counts[index], -index))
    if counts[peak] > PEAK_MONTH_THRESHOLD:
        results.append(recommendation(
            f"{counts[peak]} projects are scheduled to be active in month {peak + 1}. "
            f"Consider reviewing resource allocation for this period.",
            'suggestion',
            {'count': counts[peak], 'month': peak + 1}
        ))
    return results


RULES: Dict[str, Callable[[AnnualInvestmentProgram], List[Dict[str, Any]]]] = {
    'budget': budget_recommendations,
    'project': project_recommendations,
    'risk': risk_recommendations,
}


def find_aip(aip_id) -> Optional[AnnualInvestmentProgram]:
    try:
        pk = int(aip_id)
    except (TypeError, ValueError):
        return None
    return AnnualInvestmentProgram.objects.prefetch_related(
        'projects__expenses', 'projects__milestones'
    ).filter(pk=pk).first()


def category_recommendations(category: str, aip_id=None) -> List[Dict[str, Any]]:
    """
    Recommendations of one category.

    Without an AIP id the general suggestions are returned. A failing
    rule yields a single 'error' item so the other categories still
    come back.
    """
    if not aip_id:
        return [recommendation(message, 'suggestion') for message in GENERAL_RECOMMENDATIONS[category]]

    try:
        aip = find_aip(aip_id)
        if aip is None:
            return [recommendation("No AIP found with the provided ID", 'warning')]
        results = RULES[category](aip)
    except Exception:
        logger.exception("Error generating %s recommendations for AIP %s", category, aip_id)
        return [recommendation(f"Unable to generate {category} recommendations", 'error')]

    return results or [recommendation(f"No {category} recommendations at this time", 'info')]


def get_recommendations(aip_id=None, kind: str = 'all') -> Dict[str, Any]:
    """
    Build the advisor response.

    Args:
        aip_id: Optional AIP to analyse.
        kind: 'budget', 'project', 'risk' or 'all'.
    """
    categories = CATEGORIES if kind == 'all' else [c for c in CATEGORIES if c == kind]
    return {
        'recommendations': {
            category: category_recommendations(category, aip_id) for category in categories
        },
        'timestamp': timezone.now().isoformat(),
        'source': SOURCE,
    }


# =====================================================================
# INSIGHTS
# =====================================================================

def _expected_progress(project: AIPProject, on_date: date) -> int:
    total = abs((project.end_date - project.start_date).days)
    elapsed = abs((on_date - project.start_date).days)
    if not total:
        return 100
    return min(100, round_half_up(Decimal(elapsed) / Decimal(total) * 100))


def _insight(aip, key, title, description, kind, priority, data) -> Dict[str, Any]:
    return {
        'id': f"{key}-{aip.pk}",
        'title': title,
        'description': description,
        'type': kind,
        'priority': priority,
        'data': data,
        'created_at': timezone.now().isoformat(),
    }


def budget_allocation_insight(aip: AnnualInvestmentProgram, projects: List[AIPProject]) -> Dict[str, Any]:
    sectors = OrderedDict()
    for project in projects:
        sector = project.sector or 'Uncategorized'
        sectors[sector] = sectors.get(sector, Decimal('0')) + project.total_cost
    total = sum(sectors.values(), Decimal('0'))
    data = [
        {'name': sector, 'value': round_half_up(cost / total * 100), 'raw_value': str(cost)}
        for sector, cost in sectors.items()
    ]
    return _insight(
        aip, 'budget-allocation', 'Budget Allocation by Sector',
        f"Distribution of the {aip.fiscal_year.year} investment budget across different sectors",
        'budget', 'high', data
    )


def project_status_insight(aip: AnnualInvestmentProgram, projects: List[AIPProject]) -> Dict[str, Any]:
    counts = OrderedDict()
    for project in projects:
        counts[project.status] = counts.get(project.status, 0) + 1
    data = [{'name': status.capitalize(), 'value': count} for status, count in counts.items()]
    return _insight(
        aip, 'project-status', 'Project Status Distribution',
        'Current status distribution of all projects in the investment program',
        'project', 'medium', data
    )


def project_risk(project: AIPProject, on_date: date) -> Dict[str, Any]:
    """
    Risk score 0-1 from the gap between expected and actual progress,
    weighted up as the end date approaches.
    """
    days_remaining = max(0, (project.end_date - on_date).days)
    gap = max(0, _expected_progress(project, on_date) - project.progress)

    if days_remaining < 30:
        risk = Decimal(gap) * Decimal('0.8') + 20
    elif days_remaining < 90:
        risk = Decimal(gap) * Decimal('0.6') + 10
    else:
        risk = Decimal(gap) * Decimal('0.4')
    risk = min(Decimal('100'), max(Decimal('0'), risk)) / 100

    return {
        'name': project.title,
        'risk': float(risk),
        'budget': str(project.total_cost),
        'progress': project.progress / 100,
        'days_remaining': days_remaining,
    }


def risk_assessment_insight(aip, projects, on_date: date) -> Dict[str, Any]:
    return _insight(
        aip, 'risk-assessment', 'Project Risk Assessment',
        'Risk analysis based on project progress, budget, and timeline factors',
        'risk', 'high', [project_risk(project, on_date) for project in projects]
    )


def expenditure_trend_insight(aip, projects) -> Dict[str, Any]:
    """
    Spending per calendar month in date order. Months without spending
    are projected at the latest month's amount (or a twelfth of the AIP
    total when nothing has been spent).
    """
    expenses = sorted(
        (expense for project in projects for expense in project.expenses.all()),
        key=lambda expense: expense.date
    )
    by_month = OrderedDict()
    for expense in expenses:
        month = expense.date.strftime('%b')
        by_month[month] = by_month.get(month, Decimal('0')) + expense.amount

    historical = [{'month': month, 'expenditure': str(amount)} for month, amount in by_month.items()]
    last_amount = list(by_month.values())[-1] if by_month else (aip.total_amount / 12).quantize(Decimal('0.01'))
    projected = [
        {'month': date(2000, number, 1).strftime('%b'), 'expenditure': str(last_amount)}
        for number in range(1, 13)
        if date(2000, number, 1).strftime('%b') not in by_month
    ]
    return _insight(
        aip, 'expense-trend', 'Expenditure Trend Analysis',
        'Historical spending patterns and future projections for the investment program',
        'trend', 'medium', {'historical': historical, 'projected': projected}
    )


def implementation_efficiency_insight(aip, projects, on_date: date) -> Dict[str, Any]:
    """Budget use, timeline adherence and milestone completion of ONGOING/COMPLETED projects."""
    data = []
    for project in projects:
        if project.status not in (ProjectStatus.ONGOING, ProjectStatus.COMPLETED):
            continue

        spent = sum((expense.amount for expense in project.expenses.all()), Decimal('0'))
        budget_utilization = min(100, round_half_up(spent / project.total_cost * 100))
        timeline_adherence = min(100, max(0, 100 - abs(_expected_progress(project, on_date) - project.progress)))
        milestones = list(project.milestones.all())
        if milestones:
            completed = sum(1 for m in milestones if m.status == MilestoneStatus.COMPLETED)
            milestone_completion = round_half_up(Decimal(completed) / len(milestones) * 100)
        else:
            milestone_completion = 50

        for subject, value in (
            ('Budget Utilization', budget_utilization),
            ('Timeline Adherence', timeline_adherence),
            ('Milestone Completion', milestone_completion),
        ):
            data.append({'subject': subject, 'project': project.title, 'full_mark': 100, 'value': value})

    return _insight(
        aip, 'implementation-efficiency', 'Project Implementation Efficiency',
        'Analysis of project implementation factors across key metrics',
        'project', 'high', data
    )


def generate_aip_insights(aip: AnnualInvestmentProgram, on_date: Optional[date] = None) -> List[Dict[str, Any]]:
    """All insight data sets of an AIP."""
    on_date = on_date or today()
    projects = list(aip.projects.prefetch_related('milestones', 'expenses'))
    return [
        budget_allocation_insight(aip, projects),
        project_status_insight(aip, projects),
        risk_assessment_insight(aip, projects, on_date),
        expenditure_trend_insight(aip, projects),
        implementation_efficiency_insight(aip, projects, on_date),
    ]
