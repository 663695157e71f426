# apps/visits/services/queue_board.py
"""Display board of a branch queue, rebuilt from scratch on every read."""

from django.db import DatabaseError
from django.db.models import Q
from django.utils import timezone

from apps.visits.models import QueueEntry
from core.constants import QueueStatus
from core.exceptions import InfrastructureError


def partition_entries(entries):
    """
    Split active entries into ``waiting``, ``serving`` and ``complete``
    lists, each first come first served by ``joined_at`` then id.
    """
    board = {status.value: [] for status in QueueStatus}
    for entry in sorted(entries, key=lambda e: (e.joined_at, e.id)):
        if not entry.is_active:
            continue
        board[entry.status].append(entry)
    return board


def get_branch_entries(branch_id, day=None):
    """Open entries of the branch plus the ones completed on ``day``."""
    day = day or timezone.localdate()
    try:
        return list(
            QueueEntry.objects.filter(branch_id=branch_id, is_active=True)
            .filter(
                Q(status__in=[QueueStatus.WAITING, QueueStatus.SERVING])
                | Q(status=QueueStatus.COMPLETE, completed_at__date=day)
            )
            .select_related("appointment", "service_point")
        )
    except DatabaseError as exc:
        raise InfrastructureError() from exc


def get_branch_board(branch_id, day=None):
    return partition_entries(get_branch_entries(branch_id, day))
