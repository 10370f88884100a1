"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Forms for AIPs, projects, milestones, expenses and
             attachments.
-------------------------------------------------------------------------
"""
from django import forms

from apps.aip.models import (
    AIPAttachment, AIPExpense, AIPMilestone, AIPProject, AnnualInvestmentProgram,
    MilestoneStatus, ProjectStatus,
)


class AnnualInvestmentProgramForm(forms.ModelForm):
    """Form for creating/editing an AIP. Status is changed separately."""

    class Meta:
        model = AnnualInvestmentProgram
        fields = ['fiscal_year', 'title', 'description', 'total_amount']


class AIPProjectForm(forms.ModelForm):
    """
    Form for AIP projects.

    Status defaults to PLANNED and progress to 0; end_date must be after
    start_date (checked by the model).
    """

    class Meta:
        model = AIPProject
        fields = [
            'project_code', 'title', 'description', 'sector', 'location',
            'expected_beneficiaries', 'start_date', 'end_date', 'total_cost',
            'budget_category', 'fund_source', 'status', 'progress',
        ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['status'].required = False
        self.fields['progress'].required = False

    def clean_project_code(self):
        return (self.cleaned_data.get('project_code') or '').strip()

    def clean_status(self):
        return self.cleaned_data.get('status') or ProjectStatus.PLANNED

    def clean_progress(self):
        progress = self.cleaned_data.get('progress')
        return 0 if progress is None else progress


class AIPMilestoneForm(forms.ModelForm):

    class Meta:
        model = AIPMilestone
        fields = ['title', 'description', 'due_date', 'status']

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['status'].required = False

    def clean_status(self):
        return self.cleaned_data.get('status') or MilestoneStatus.PENDING


class AIPExpenseForm(forms.ModelForm):

    class Meta:
        model = AIPExpense
        fields = ['amount', 'description', 'date', 'reference', 'transaction']


class AIPAttachmentForm(forms.ModelForm):

    class Meta:
        model = AIPAttachment
        fields = ['file_name', 'file_url', 'file_type', 'file_size', 'description']

    def clean_file_size(self):
        size = self.cleaned_data.get('file_size')
        if not size:
            raise forms.ValidationError("Filesize must be a positive number")
        return size
