# apps/settings_core/services.py

import logging

from django.db import DatabaseError, transaction

from core.exceptions import InfrastructureError
from .models import BranchPolicy

logger = logging.getLogger(__name__)


class SettingsService:
    """Service for reading and updating branch policies"""

    @staticmethod
    def get_branch_policy(branch_id):
        """
        Policy of a branch. Branches without a stored policy get an unsaved
        instance holding the defaults.
        """
        try:
            policy = BranchPolicy.objects.filter(branch_id=branch_id).first()
        except DatabaseError as exc:
            logger.exception(f"Could not load policy for branch {branch_id}")
            raise InfrastructureError() from exc

        if policy is None:
            policy = BranchPolicy(branch_id=branch_id)
        return policy

    @staticmethod
    @transaction.atomic
    def update_branch_policy(branch_id, data, user=None):
        policy, created = BranchPolicy.objects.select_for_update().get_or_create(
            branch_id=branch_id
        )
        for field, value in data.items():
            setattr(policy, field, value)
        if not created:
            policy.version += 1
        policy.stamp(user, created=created)
        policy.save()

        logger.info(f"Branch {branch_id} policy updated to version {policy.version}")
        return policy
