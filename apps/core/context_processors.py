"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Template context processor for the barangay profile.
-------------------------------------------------------------------------
"""
from apps.core.models import BarangayInfo


def barangay(request):
    """
    Context processor exposing the barangay profile to every template.
    """
    return {'barangay_info': BarangayInfo.load()}
