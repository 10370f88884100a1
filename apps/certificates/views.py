"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: JSON API views for certificate requests, the approval
             workflow, PDF generation, templates and the public
             verification endpoint.
-------------------------------------------------------------------------
"""
import logging

from django.db import transaction
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views import View

from apps.core.api import ApiView, validate_form
from apps.core.exceptions import InvalidStateException, RecordValidationException
from apps.core.utils import merge_instance_data, paginate, parse_bool
from apps.certificates.forms import CertificateForm, CertificateTemplateForm
from apps.certificates.models import Certificate, CertificateStatus, CertificateTemplate
from apps.certificates.services import (
    create_certificate, generate_certificate_pdf, verification_payload,
)
from apps.certificates.workflows import perform_transition
from apps.users.permissions import CERTIFICATE_DELETE_ROLES, CERTIFICATE_UPDATE_ROLES

logger = logging.getLogger(__name__)


class CertificateListCreateView(ApiView):
    """
    GET: certificates filtered by status, type, resident or exact
    control number. POST: request a certificate.
    """
    write_roles = CERTIFICATE_UPDATE_ROLES

    def get(self, request):
        queryset = Certificate.objects.select_related('resident')
        params = request.GET
        if params.get('control_number'):
            queryset = queryset.filter(control_number=params['control_number'])
        if params.get('status'):
            queryset = queryset.filter(status=params['status'])
        if params.get('type'):
            queryset = queryset.filter(certificate_type=params['type'])
        if params.get('resident'):
            queryset = queryset.filter(resident_id=params['resident'])

        certificates, meta = paginate(queryset, params.get('page'), params.get('limit'))
        return JsonResponse({
            'certificates': [certificate.to_dict() for certificate in certificates],
            'meta': meta,
        })

    def post(self, request):
        form = CertificateForm(data=self.get_json())
        validate_form(form)
        certificate = create_certificate(form.save(commit=False), user=request.user)
        return JsonResponse(certificate.to_dict(), status=201)


class CertificateDetailView(ApiView):
    """
    GET/PATCH/DELETE a certificate.

    PATCH edits the request details while PENDING; a ``status`` key is
    applied through the workflow.
    """
    write_roles = CERTIFICATE_UPDATE_ROLES
    delete_roles = CERTIFICATE_DELETE_ROLES

    def get(self, request, pk):
        certificate = get_object_or_404(Certificate.objects.select_related('resident'), pk=pk)
        return JsonResponse(certificate.to_dict())

    @transaction.atomic
    def patch(self, request, pk):
        certificate = get_object_or_404(Certificate, pk=pk)
        data = self.get_json()
        target_status = data.pop('status', None)

        if data:
            if certificate.status != CertificateStatus.PENDING:
                raise InvalidStateException("Only pending certificates can be edited.")
            form = CertificateForm(
                data=merge_instance_data(certificate, data, CertificateForm.Meta.fields),
                instance=certificate
            )
            validate_form(form)
            certificate = form.save(commit=False)
            certificate.save_with_user(request.user)

        if target_status:
            certificate = perform_transition(certificate, target_status, request.user)

        return JsonResponse(certificate.to_dict())

    put = patch

    def delete(self, request, pk):
        certificate = get_object_or_404(Certificate, pk=pk)
        control_number = certificate.control_number
        certificate.delete()
        logger.info("Certificate %s deleted by %s", control_number, request.user.email)
        return JsonResponse({'message': 'Certificate deleted successfully'})


class CertificateStatusView(ApiView):
    """POST {status, remarks}: move the certificate through the workflow."""
    write_roles = CERTIFICATE_UPDATE_ROLES

    def post(self, request, pk):
        certificate = get_object_or_404(Certificate, pk=pk)
        data = self.get_json()
        if not data.get('status'):
            raise RecordValidationException("Status is required.")
        previous = certificate.status
        certificate = perform_transition(
            certificate, data['status'], request.user, remarks=data.get('remarks') or ''
        )
        logger.info(
            "Certificate %s: %s -> %s by %s",
            certificate.control_number, previous, certificate.status, request.user.email
        )
        return JsonResponse(certificate.to_dict())


class CertificatePDFView(ApiView):
    """Render the certificate document."""

    def get(self, request, pk):
        certificate = get_object_or_404(
            Certificate.objects.select_related('resident', 'resident__household'), pk=pk
        )
        if certificate.status in (CertificateStatus.REJECTED, CertificateStatus.CANCELLED):
            raise InvalidStateException(
                f"A {certificate.get_status_display().lower()} certificate cannot be printed."
            )
        return generate_certificate_pdf(certificate, request=request)


class CertificateVerifyView(View):
    """Public verification of a control number (no login required)."""

    def get(self, request, control_number):
        certificate = Certificate.objects.select_related('resident').filter(
            control_number=control_number
        ).first()
        if certificate is None:
            return JsonResponse(
                {'valid': False, 'error': 'Certificate not found'},
                status=404
            )
        return JsonResponse(verification_payload(certificate))


# =====================================================================
# TEMPLATE VIEWS
# =====================================================================

class CertificateTemplateListCreateView(ApiView):
    write_roles = CERTIFICATE_UPDATE_ROLES

    def get(self, request):
        queryset = CertificateTemplate.objects.all()
        if request.GET.get('type'):
            queryset = queryset.filter(certificate_type=request.GET['type'])
        if parse_bool(request.GET.get('default')):
            queryset = queryset.filter(is_default=True)
        return JsonResponse({'templates': [template.to_dict() for template in queryset]})

    def post(self, request):
        form = CertificateTemplateForm(data=self.get_json())
        validate_form(form)
        template = form.save()
        return JsonResponse(template.to_dict(), status=201)


class CertificateTemplateDetailView(ApiView):
    write_roles = CERTIFICATE_UPDATE_ROLES
    delete_roles = CERTIFICATE_DELETE_ROLES

    def get(self, request, pk):
        return JsonResponse(get_object_or_404(CertificateTemplate, pk=pk).to_dict())

    def put(self, request, pk):
        template = get_object_or_404(CertificateTemplate, pk=pk)
        form = CertificateTemplateForm(
            data=merge_instance_data(template, self.get_json(), CertificateTemplateForm.Meta.fields),
            instance=template
        )
        validate_form(form)
        template = form.save()
        return JsonResponse(template.to_dict())

    patch = put

    def delete(self, request, pk):
        template = get_object_or_404(CertificateTemplate, pk=pk)
        template.delete()
        return JsonResponse({'message': 'Template deleted successfully'})
