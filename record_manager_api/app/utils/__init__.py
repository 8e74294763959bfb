"""
Small, dependency-free helpers used across the application: the
response envelope and identifier normalisation.
"""
