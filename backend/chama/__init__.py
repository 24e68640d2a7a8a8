"""
Chama Tracker - membership and monthly contribution tracking for community groups.
"""
__version__ = "1.0.0"
