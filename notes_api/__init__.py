"""
Multi-Tenant Notes API

Tenant-isolated notes with JWT authentication, an admin-only plan upgrade
and a note cap for tenants on the free plan.
"""

__version__ = "1.0.0"
