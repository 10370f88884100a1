"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Centralized logging for blotter case events.
-------------------------------------------------------------------------
"""
import logging

logger = logging.getLogger('blotter')


def _actor(user) -> str:
    return getattr(user, 'email', None) or 'system'


class BlotterLogger:
    """Centralized logging for blotter operations"""

    @staticmethod
    def log_case_filed(case, user):
        """Log a newly filed complaint"""
        logger.info(
            f"Case filed: {case.case_number} | "
            f"Type: {case.incident_type} | "
            f"Parties: {case.parties.count()} | "
            f"Filed by: {_actor(user)}",
            extra={
                'case_id': case.pk,
                'case_number': case.case_number,
                'priority': case.priority,
                'user_id': getattr(user, 'pk', None),
            }
        )

    @staticmethod
    def log_status_changed(case, previous_status: str, user, notes: str = ''):
        """Log a status change"""
        logger.info(
            f"Case status changed: {case.case_number} | "
            f"{previous_status} -> {case.status} | "
            f"Notes: {notes} | "
            f"Changed by: {_actor(user)}",
            extra={
                'case_id': case.pk,
                'case_number': case.case_number,
                'previous_status': previous_status,
                'new_status': case.status,
                'user_id': getattr(user, 'pk', None),
            }
        )

    @staticmethod
    def log_cfa_issued(case, user, reissued: bool = False):
        """Log issuance of a Certification to File Action"""
        logger.warning(
            f"CFA {'re-issued' if reissued else 'issued'}: {case.case_number} | "
            f"Certification date: {case.certification_date} | "
            f"Issued by: {_actor(user)}",
            extra={
                'case_id': case.pk,
                'case_number': case.case_number,
                'reissued': reissued,
                'user_id': getattr(user, 'pk', None),
            }
        )
