"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Base class for JSON API views. Handles authentication,
             role checks, JSON body parsing and conversion of BMS
             exceptions into JSON error responses.
-------------------------------------------------------------------------
"""
import json
import logging
from typing import Any, Dict, List, Optional

from django.core.exceptions import ObjectDoesNotExist, PermissionDenied, ValidationError
from django.http import Http404, JsonResponse
from django.views import View

from apps.core.exceptions import BMSException, RecordValidationException
from apps.users.permissions import require_role

logger = logging.getLogger(__name__)

SAFE_METHODS = ('GET', 'HEAD', 'OPTIONS')


def json_body(request) -> Dict[str, Any]:
    """
    Decode the request body as a JSON object.

    Raises:
        RecordValidationException: If the body is not a JSON object.
    """
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body)
    except (ValueError, UnicodeDecodeError):
        raise RecordValidationException("Request body is not valid JSON.")
    if not isinstance(payload, dict):
        raise RecordValidationException("Request body must be a JSON object.")
    return payload


def form_errors(form) -> Dict[str, List[str]]:
    """Flatten ModelForm errors into {field: [messages]}."""
    return {
        field: [error['message'] for error in errors]
        for field, errors in form.errors.get_json_data().items()
    }


def validate_form(form) -> Any:
    """
    Validate a bound form and return its cleaned data.

    Raises:
        RecordValidationException: With per-field messages in details.
    """
    if not form.is_valid():
        raise RecordValidationException("Validation failed.", details=form_errors(form))
    return form.cleaned_data


class ApiView(View):
    """
    Base view for the JSON API.

    Attributes:
        required_roles: Roles allowed to read. Empty admits any
            authenticated user.
        write_roles: Roles allowed for POST/PUT/PATCH. Defaults to
            required_roles.
        delete_roles: Roles allowed for DELETE. Defaults to write_roles.
    """

    required_roles: List[str] = []
    write_roles: Optional[List[str]] = None
    delete_roles: Optional[List[str]] = None

    def get_roles_for_method(self, method: str) -> List[str]:
        if method in SAFE_METHODS:
            return self.required_roles
        if method == 'DELETE' and self.delete_roles is not None:
            return self.delete_roles
        if self.write_roles is not None:
            return self.write_roles
        return self.required_roles

    def dispatch(self, request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse({'error': 'Unauthorized'}, status=401)

        try:
            require_role(request.user, self.get_roles_for_method(request.method), "access this resource")
            return super().dispatch(request, *args, **kwargs)
        except BMSException as exc:
            logger.info(
                "%s %s rejected: %s (%s)",
                request.method, request.path, exc.message, exc.error_code
            )
            return JsonResponse(exc.to_dict(), status=exc.status_code)
        except PermissionDenied as exc:
            return JsonResponse({'error': str(exc) or 'Forbidden'}, status=403)
        except (Http404, ObjectDoesNotExist) as exc:
            return JsonResponse({'error': str(exc) or 'Not found'}, status=404)
        except (ValueError, ValidationError) as exc:
            # Malformed ids, dates or numbers in query strings and payloads
            messages = exc.messages if isinstance(exc, ValidationError) else [str(exc)]
            error = RecordValidationException("Invalid parameter value.", details={'errors': messages})
            logger.info("%s %s rejected: %s", request.method, request.path, messages)
            return JsonResponse(error.to_dict(), status=error.status_code)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.path)
            return JsonResponse({'error': 'Internal server error'}, status=500)

    def get_json(self) -> Dict[str, Any]:
        return json_body(self.request)
