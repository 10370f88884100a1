"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Advisor app. Rule-based AIP recommendations and insights.
-------------------------------------------------------------------------
"""
