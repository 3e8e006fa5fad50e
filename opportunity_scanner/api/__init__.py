"""
HTTP API for the Opportunity Scanner service.
"""
