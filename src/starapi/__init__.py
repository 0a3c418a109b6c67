"""
StarAPI - ad-hoc HTTP request client with a library of saved endpoints.
"""

__version__ = "0.1.0"
