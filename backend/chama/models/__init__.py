"""
SQLAlchemy models for Chama Tracker.
"""
from chama.models.member import Member
from chama.models.contribution import Contribution

__all__ = ["Member", "Contribution"]
