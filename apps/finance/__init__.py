"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Finance app. Fiscal years, budgets, suppliers, transactions
             and financial permissions.
-------------------------------------------------------------------------
"""
