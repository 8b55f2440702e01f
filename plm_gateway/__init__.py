"""
PLM Gateway
REST gateway translating simple calls into the Teamcenter REST dialect
"""

__version__ = "1.0.0"
