"""
Utility helpers (database sessions, logging) for the Opportunity Scanner service.
"""
