"""Poetry Console - admin dashboard analytics for a poetry site"""

__version__ = "1.0.0"
