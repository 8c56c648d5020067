"""
awsso - refresh AWS SSO short-term credentials from the local SSO cache.
"""

__version__ = "0.1.0"
