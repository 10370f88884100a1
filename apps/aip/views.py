"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: JSON API views for Annual Investment Programs, their
             projects, milestones, expenses and attachments.
-------------------------------------------------------------------------
"""
import logging

from django.http import JsonResponse
from django.shortcuts import get_object_or_404

from apps.aip.forms import (
    AIPAttachmentForm, AIPExpenseForm, AIPMilestoneForm, AIPProjectForm,
    AnnualInvestmentProgramForm,
)
from apps.aip.models import (
    AIPAttachment, AIPExpense, AIPMilestone, AIPProject, AIPStatus, AnnualInvestmentProgram,
)
from apps.aip.services import (
    change_aip_status, delete_aip, delete_milestone, ensure_aip_editable, ensure_expense_allowed,
    ensure_milestone_editable, ensure_project_can_be_added, ensure_project_editable,
    ensure_unique_project_code, record_expense, save_milestone, validate_expense_transaction,
)
from apps.core.api import ApiView, validate_form
from apps.core.exceptions import RecordValidationException
from apps.core.utils import merge_instance_data
from apps.users.permissions import AIP_DELETE_ROLES, FINANCE_ROLES

logger = logging.getLogger(__name__)


def aip_queryset():
    return AnnualInvestmentProgram.objects.select_related(
        'fiscal_year', 'created_by', 'approved_by'
    ).prefetch_related('projects')


class AIPApiView(ApiView):
    """AIP endpoints are limited to the treasurer, captain and super admin."""
    required_roles = FINANCE_ROLES


# =====================================================================
# AIP VIEWS
# =====================================================================

class AIPListCreateView(AIPApiView):
    """GET: AIPs filtered by fiscal year and status. POST: new DRAFT AIP."""

    def get(self, request):
        queryset = aip_queryset()
        if request.GET.get('fiscal_year'):
            queryset = queryset.filter(fiscal_year_id=request.GET['fiscal_year'])
        if request.GET.get('status'):
            queryset = queryset.filter(status=request.GET['status'])
        return JsonResponse({'aips': [aip.to_dict() for aip in queryset]})

    def post(self, request):
        form = AnnualInvestmentProgramForm(data=self.get_json())
        validate_form(form)
        aip = form.save(commit=False)
        aip.status = AIPStatus.DRAFT
        aip.save_with_user(request.user)
        logger.info("AIP '%s' created by %s", aip.title, request.user.email)
        return JsonResponse(aip.to_dict(), status=201)


class AIPDetailView(AIPApiView):
    """
    GET: AIP with projects, milestones, expenses and attachments.
    PUT/PATCH: edit a DRAFT AIP; a status key is applied through the
    workflow. DELETE: DRAFT or REJECTED AIPs only.
    """
    delete_roles = AIP_DELETE_ROLES

    def get(self, request, pk):
        aip = get_object_or_404(aip_queryset(), pk=pk)
        return JsonResponse(aip.to_dict(detail=True))

    def put(self, request, pk):
        aip = get_object_or_404(AnnualInvestmentProgram, pk=pk)
        data = self.get_json()
        status = data.pop('status', None)

        if data:
            ensure_aip_editable(aip)
            form = AnnualInvestmentProgramForm(
                data=merge_instance_data(aip, data, AnnualInvestmentProgramForm.Meta.fields),
                instance=aip
            )
            validate_form(form)
            aip = form.save(commit=False)
            aip.save_with_user(request.user)

        if status:
            aip = change_aip_status(aip, status, request.user)
        return JsonResponse(aip.to_dict())

    patch = put

    def delete(self, request, pk):
        aip = get_object_or_404(AnnualInvestmentProgram, pk=pk)
        delete_aip(aip, request.user)
        return JsonResponse({'success': True})


class AIPStatusView(AIPApiView):
    """POST {status}: submit, approve, reject, implement or complete an AIP."""

    def post(self, request, pk):
        aip = get_object_or_404(AnnualInvestmentProgram, pk=pk)
        status = self.get_json().get('status')
        if not status:
            raise RecordValidationException("Status is required.")
        aip = change_aip_status(aip, status, request.user)
        return JsonResponse(aip.to_dict())


# =====================================================================
# PROJECT VIEWS
# =====================================================================

class AIPProjectListCreateView(AIPApiView):

    def get(self, request, pk):
        aip = get_object_or_404(AnnualInvestmentProgram, pk=pk)
        projects = aip.projects.select_related('budget_category').prefetch_related('milestones', 'expenses')
        return JsonResponse({'projects': [project.to_dict(detail=True) for project in projects]})

    def post(self, request, pk):
        aip = get_object_or_404(AnnualInvestmentProgram, pk=pk)
        ensure_project_can_be_added(aip)

        data = self.get_json()
        ensure_unique_project_code(aip, (data.get('project_code') or '').strip())
        form = AIPProjectForm(data=data)
        validate_form(form)
        project = form.save(commit=False)
        project.aip = aip
        project.save()
        logger.info("Project %s added to AIP %s by %s", project.project_code, aip.pk, request.user.email)
        return JsonResponse(project.to_dict(), status=201)


class AIPProjectDetailView(AIPApiView):

    def get(self, request, pk):
        project = get_object_or_404(
            AIPProject.objects.select_related('aip__fiscal_year', 'budget_category'), pk=pk
        )
        data = project.to_dict(detail=True)
        data['aip'] = {
            'id': project.aip_id,
            'title': project.aip.title,
            'status': project.aip.status,
            'fiscal_year': project.aip.fiscal_year.year,
        }
        data['attachments'] = [attachment.to_dict() for attachment in project.attachments.all()]
        return JsonResponse(data)

    def patch(self, request, pk):
        project = get_object_or_404(AIPProject.objects.select_related('aip'), pk=pk)
        ensure_project_editable(project)

        data = merge_instance_data(project, self.get_json(), AIPProjectForm.Meta.fields)
        ensure_unique_project_code(project.aip, (data.get('project_code') or '').strip(), exclude_pk=project.pk)
        form = AIPProjectForm(data=data, instance=project)
        validate_form(form)
        project = form.save()
        return JsonResponse(project.to_dict())

    put = patch

    def delete(self, request, pk):
        project = get_object_or_404(AIPProject.objects.select_related('aip'), pk=pk)
        ensure_project_editable(project, action="delete")
        project.delete()
        return JsonResponse({'message': 'Project deleted successfully'})


# =====================================================================
# MILESTONE VIEWS
# =====================================================================

class AIPMilestoneListCreateView(AIPApiView):

    def get(self, request, pk):
        project = get_object_or_404(AIPProject, pk=pk)
        return JsonResponse({'milestones': [milestone.to_dict() for milestone in project.milestones.all()]})

    def post(self, request, pk):
        project = get_object_or_404(AIPProject.objects.select_related('aip'), pk=pk)
        ensure_milestone_editable(project, action="add")

        form = AIPMilestoneForm(data=self.get_json())
        validate_form(form)
        milestone = form.save(commit=False)
        milestone.project = project
        milestone = save_milestone(milestone)
        return JsonResponse(milestone.to_dict(), status=201)


class AIPMilestoneDetailView(AIPApiView):

    def get(self, request, pk):
        return JsonResponse(get_object_or_404(AIPMilestone, pk=pk).to_dict())

    def patch(self, request, pk):
        milestone = get_object_or_404(AIPMilestone.objects.select_related('project__aip'), pk=pk)
        ensure_milestone_editable(milestone.project)

        previous_status = milestone.status
        form = AIPMilestoneForm(
            data=merge_instance_data(milestone, self.get_json(), AIPMilestoneForm.Meta.fields),
            instance=milestone
        )
        validate_form(form)
        milestone = save_milestone(form.save(commit=False), previous_status=previous_status)
        return JsonResponse(milestone.to_dict())

    put = patch

    def delete(self, request, pk):
        milestone = get_object_or_404(AIPMilestone.objects.select_related('project__aip'), pk=pk)
        ensure_milestone_editable(milestone.project, action="delete")
        delete_milestone(milestone)
        return JsonResponse({'message': 'Milestone deleted successfully'})


# =====================================================================
# EXPENSE VIEWS
# =====================================================================

class AIPExpenseListCreateView(AIPApiView):

    def get(self, request, pk):
        project = get_object_or_404(AIPProject, pk=pk)
        expenses = project.expenses.select_related('transaction')
        return JsonResponse({
            'expenses': [expense.to_dict() for expense in expenses],
            'total': str(project.get_total_expenditure()),
        })

    def post(self, request, pk):
        project = get_object_or_404(AIPProject, pk=pk)
        form = AIPExpenseForm(data=self.get_json())
        validate_form(form)
        expense = record_expense(project, form.save(commit=False), request.user)
        return JsonResponse(expense.to_dict(), status=201)


class AIPExpenseDetailView(AIPApiView):

    def get(self, request, pk):
        expense = get_object_or_404(AIPExpense.objects.select_related('transaction'), pk=pk)
        return JsonResponse(expense.to_dict())

    def patch(self, request, pk):
        expense = get_object_or_404(AIPExpense.objects.select_related('project'), pk=pk)
        ensure_expense_allowed(expense.project, action="update expense for")

        form = AIPExpenseForm(
            data=merge_instance_data(expense, self.get_json(), AIPExpenseForm.Meta.fields),
            instance=expense
        )
        validate_form(form)
        expense = form.save(commit=False)
        validate_expense_transaction(expense)
        expense.save_with_user(request.user)
        return JsonResponse(expense.to_dict())

    put = patch

    def delete(self, request, pk):
        expense = get_object_or_404(AIPExpense.objects.select_related('project'), pk=pk)
        ensure_expense_allowed(expense.project, action="delete expense for")
        expense.delete()
        return JsonResponse({'message': 'Expense deleted successfully'})


# =====================================================================
# ATTACHMENT VIEWS
# =====================================================================

class AIPAttachmentListCreateView(AIPApiView):
    """Attachments of an AIP (owner='aip') or of a project (owner='project')."""
    owner = 'aip'

    def get_owner(self, pk):
        model = AnnualInvestmentProgram if self.owner == 'aip' else AIPProject
        return get_object_or_404(model, pk=pk)

    def get(self, request, pk):
        owner = self.get_owner(pk)
        attachments = owner.attachments.select_related('uploaded_by')
        return JsonResponse({'attachments': [attachment.to_dict() for attachment in attachments]})

    def post(self, request, pk):
        owner = self.get_owner(pk)
        form = AIPAttachmentForm(data=self.get_json())
        validate_form(form)
        attachment = form.save(commit=False)
        setattr(attachment, self.owner, owner)
        attachment.uploaded_by = request.user
        attachment.save()
        return JsonResponse(attachment.to_dict(), status=201)


class AIPAttachmentDetailView(AIPApiView):

    def delete(self, request, pk):
        attachment = get_object_or_404(AIPAttachment, pk=pk)
        attachment.delete()
        return JsonResponse({'message': 'Attachment deleted successfully'})
