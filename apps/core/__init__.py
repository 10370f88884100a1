"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Core app initialization. Contains shared mixins, exceptions,
             API base view and barangay settings.
-------------------------------------------------------------------------
"""
