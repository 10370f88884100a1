"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Certificates app. Barangay clearances, residency,
             indigency and business permits with verification.
-------------------------------------------------------------------------
"""
