"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Annual Investment Program app. Programs, their projects,
             milestones, expenses and attachments.
-------------------------------------------------------------------------
"""
