"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: PDF rendering of Django templates through WeasyPrint,
             shared by certificates, blotter documents and reports.
-------------------------------------------------------------------------
"""
import logging
from typing import Any, Dict, Optional

from django.http import HttpResponse
from django.template.loader import render_to_string

logger = logging.getLogger(__name__)


def html_to_pdf(html_string: str, base_url: Optional[str] = None) -> bytes:
    """Convert an HTML document to PDF bytes."""
    from weasyprint import HTML
    return HTML(string=html_string, base_url=base_url).write_pdf()


def render_pdf(
    template_name: str,
    context: Dict[str, Any],
    filename: str,
    request=None,
    inline: bool = False
) -> HttpResponse:
    """
    Render a template to PDF and wrap it in an HttpResponse.

    Args:
        template_name: Django template path (e.g. 'blotter/cfa_pdf.html').
        context: Template context.
        filename: Download file name.
        request: Optional request, used to resolve relative asset URLs.
        inline: Display in the browser instead of downloading.
    """
    html_string = render_to_string(template_name, context)
    base_url = request.build_absolute_uri('/') if request is not None else None
    pdf_file = html_to_pdf(html_string, base_url=base_url)

    response = HttpResponse(pdf_file, content_type='application/pdf')
    disposition = 'inline' if inline else 'attachment'
    response['Content-Disposition'] = f'{disposition}; filename="{filename}"'
    logger.info("Rendered %s (%d bytes)", filename, len(pdf_file))
    return response
