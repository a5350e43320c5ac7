"""
Business policies for foster assignment and requests
"""

from foster_app.business.fostering.policies.group_conflict import GroupConflictDetector
from foster_app.business.fostering.policies.group_membership import GroupMembershipPolicy
from foster_app.business.fostering.policies.pending_request import PendingRequestPolicy
from foster_app.business.fostering.policies.request_eligibility import RequestEligibilityPolicy

__all__ = [
    'GroupConflictDetector',
    'GroupMembershipPolicy',
    'PendingRequestPolicy',
    'RequestEligibilityPolicy',
]
