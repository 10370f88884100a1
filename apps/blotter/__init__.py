"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Blotter app. Katarungang Pambarangay dispute cases from
             filing through mediation, conciliation and certification.
-------------------------------------------------------------------------
"""
