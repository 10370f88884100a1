"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Certificate services: control number generation,
             placeholder substitution, PDF rendering and public
             verification.
-------------------------------------------------------------------------
"""
import logging
from datetime import date
from typing import Any, Dict, Optional

from django.conf import settings
from django.db import transaction
from django.http import HttpResponse
from django.utils.html import escape
from django.utils.safestring import mark_safe

from apps.core.models import BarangayInfo, Officials
from apps.core.pdf import render_pdf
from apps.core.utils import next_in_sequence, today
from apps.certificates.models import (
    Certificate, CertificateStatus, CertificateTemplate, CertificateType,
)
from apps.residents.services import residency_duration

logger = logging.getLogger(__name__)


PLACEHOLDERS = (
    '[RESIDENT_NAME]', '[RESIDENT_AGE]', '[ADDRESS]', '[YEARS]', '[PURPOSE]',
    '[DATE]', '[BUSINESS_NAME]', '[OWNER_NAME]', '[BUSINESS_ADDRESS]',
)

DEFAULT_PURPOSE = 'whatever legal purpose it may serve'

# Built-in bodies used when a type has no default template
DEFAULT_BODIES = {
    CertificateType.RESIDENCY: (
        "This is to certify that <strong>[RESIDENT_NAME]</strong>, [RESIDENT_AGE] years old, "
        "is a bona fide resident of <strong>[ADDRESS]</strong> of this Barangay for [YEARS]."
        "<br><br>This CERTIFICATION is being issued upon the request of the above-named "
        "person on [DATE] for the purpose of [PURPOSE]."
    ),
    CertificateType.INDIGENCY: (
        "This is to certify that <strong>[RESIDENT_NAME]</strong>, [RESIDENT_AGE] years old, "
        "a resident of <strong>[ADDRESS]</strong>, is recognized as an indigent resident of "
        "this Barangay.<br><br>This certification is issued on [DATE] for the purpose of [PURPOSE]."
    ),
    CertificateType.CLEARANCE: (
        "This is to certify that <strong>[RESIDENT_NAME]</strong>, [RESIDENT_AGE] years old, "
        "and a resident of <strong>[ADDRESS]</strong> is a person of good moral character and "
        "has NO DEROGATORY RECORD on file in this Barangay.<br><br>This CLEARANCE is being "
        "issued upon the request of the above-named person on [DATE] for the purpose of [PURPOSE]."
    ),
    CertificateType.BUSINESS_PERMIT: (
        "Permission is hereby granted to <strong>[OWNER_NAME]</strong> to operate "
        "<strong>[BUSINESS_NAME]</strong> located at <strong>[BUSINESS_ADDRESS]</strong> within "
        "the territorial jurisdiction of this Barangay, subject to existing laws and ordinances."
        "<br><br>Issued on [DATE]."
    ),
    CertificateType.CFA: (
        "This is to certify that the complaint involving <strong>[RESIDENT_NAME]</strong> of "
        "[ADDRESS] was brought before the Lupong Tagapamayapa and no settlement was reached."
        "<br><br>Issued on [DATE] for the purpose of [PURPOSE]."
    ),
}


def generate_control_number(year: Optional[int] = None) -> str:
    """
    Generate the next control number for a year.

    Format: CN-YYYY-NNNNN where NNNNN is sequential within the year.
    Must be called inside a transaction so the row lock holds until
    the certificate is saved.
    """
    year = year or today().year
    prefix = f"{settings.BMS_CERTIFICATE_PREFIX}-{year}-"

    numbers = Certificate.objects.select_for_update().filter(
        control_number__startswith=prefix
    ).values_list('control_number', flat=True)
    counter = next_in_sequence(numbers)
    return f"{prefix}{counter:05d}"


@transaction.atomic
def create_certificate(certificate: Certificate, user=None) -> Certificate:
    """
    Save a new certificate request as PENDING with a fresh control number.

    The signing official defaults to the Punong Barangay.
    """
    certificate.control_number = generate_control_number()
    certificate.status = CertificateStatus.PENDING
    if not certificate.official:
        certificate.official = Officials.load().punong_barangay
    certificate.save_with_user(user)
    logger.info(
        "Certificate %s (%s) requested for resident %s",
        certificate.control_number, certificate.certificate_type, certificate.resident_id
    )
    return certificate


def verification_url(certificate: Certificate) -> str:
    return f"{settings.APP_URL.rstrip('/')}/verify/{certificate.control_number}/"


def format_long_date(value: date) -> str:
    """e.g. 'October 18, 2026'"""
    return f"{value:%B} {value.day}, {value.year}"


def describe_residency(certificate: Certificate) -> str:
    duration = residency_duration(certificate.resident)
    if duration['years']:
        return f"{duration['years']} year(s)"
    return f"{duration['months']} month(s)"


def placeholder_values(certificate: Certificate) -> Dict[str, str]:
    """Values substituted into template placeholders (not yet escaped)."""
    resident = certificate.resident
    household = resident.household
    age = resident.age
    return {
        '[RESIDENT_NAME]': resident.full_name,
        '[RESIDENT_AGE]': '' if age is None else str(age),
        '[ADDRESS]': household.full_address if household else resident.address,
        '[YEARS]': describe_residency(certificate),
        '[PURPOSE]': certificate.purpose or DEFAULT_PURPOSE,
        '[DATE]': format_long_date(certificate.issued_date or today()),
        '[BUSINESS_NAME]': certificate.business_name,
        '[OWNER_NAME]': certificate.owner_name or resident.full_name,
        '[BUSINESS_ADDRESS]': certificate.business_address,
    }


def fill_placeholders(content: str, values: Dict[str, str]) -> str:
    """
    Replace placeholders in template HTML with escaped values.

    Example:
        >>> fill_placeholders("Hello [RESIDENT_NAME]", {'[RESIDENT_NAME]': 'Juan & Co'})
        'Hello Juan &amp; Co'
    """
    for placeholder, value in values.items():
        content = content.replace(placeholder, escape(value or ''))
    return content


def get_template(certificate_type: str) -> Optional[CertificateTemplate]:
    return CertificateTemplate.objects.filter(
        certificate_type=certificate_type, is_default=True
    ).first()


def build_certificate_context(certificate: Certificate) -> Dict[str, Any]:
    """Context for templates/certificates/certificate_pdf.html."""
    template = get_template(certificate.certificate_type)
    content = template.content if template else DEFAULT_BODIES[certificate.certificate_type]
    values = placeholder_values(certificate)

    return {
        'certificate': certificate,
        'title': str(certificate.get_certificate_type_display()).upper(),
        'body': mark_safe(fill_placeholders(content, values)),
        'header_html': mark_safe(template.header_html) if template else '',
        'footer_html': mark_safe(template.footer_html) if template else '',
        'css': mark_safe(template.css) if template else '',
        'barangay_info': BarangayInfo.load(),
        'officials': Officials.load(),
        'official_name': certificate.official or Officials.load().punong_barangay,
        'verification_url': verification_url(certificate),
        'issued_on': format_long_date(certificate.issued_date or today()),
    }


def generate_certificate_pdf(certificate: Certificate, request=None) -> HttpResponse:
    """Render the certificate PDF inline in the browser."""
    context = build_certificate_context(certificate)
    return render_pdf(
        'certificates/certificate_pdf.html',
        context,
        filename=f"{certificate.control_number}.pdf",
        request=request,
        inline=True
    )


def verification_payload(certificate: Certificate) -> Dict[str, Any]:
    """Public data returned by the verification page."""
    return {
        'valid': certificate.status in (CertificateStatus.APPROVED, CertificateStatus.RELEASED),
        'control_number': certificate.control_number,
        'certificate_type': certificate.certificate_type,
        'certificate_type_display': str(certificate.get_certificate_type_display()),
        'resident_name': certificate.resident.full_name,
        'status': certificate.status,
        'issued_date': certificate.issued_date.isoformat() if certificate.issued_date else None,
        'barangay': BarangayInfo.load().name,
    }
