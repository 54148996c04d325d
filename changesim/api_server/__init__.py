"""
API server package: HTTP interface for impact analysis.

Handles authentication and session cookies, and delegates to the analysis
service for results.
"""
