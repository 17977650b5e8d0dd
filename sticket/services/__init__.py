"""Service layer"""
from sticket.services.badge_service import BadgeService

__all__ = ["BadgeService"]
