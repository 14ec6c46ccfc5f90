"""
Monitoring services.
"""
