# apps/settings_core/views.py

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.clinics.models import Branch
from core.permissions import IsAdminOrReadOnly, has_branch_access
from .serializers import BranchPolicySerializer
from .services import SettingsService


class BranchPolicyView(APIView):
    """
    GET: effective policy of a branch (defaults when never configured)
    PUT/PATCH: administrators update it
    """
    permission_classes = [IsAuthenticated, IsAdminOrReadOnly]

    def get(self, request, branch_id):
        branch = get_object_or_404(Branch, pk=branch_id, deleted_at__isnull=True)
        if not has_branch_access(request.user, branch.id) and request.user.branch_id is not None:
            return Response(
                {'error': 'Not allowed to view policies of other branches'},
                status=status.HTTP_403_FORBIDDEN,
            )
        policy = SettingsService.get_branch_policy(branch.id)
        return Response(BranchPolicySerializer(policy).data)

    def put(self, request, branch_id):
        return self._update(request, branch_id, partial=False)

    def patch(self, request, branch_id):
        return self._update(request, branch_id, partial=True)

    def _update(self, request, branch_id, partial):
        branch = get_object_or_404(Branch, pk=branch_id, deleted_at__isnull=True)
        serializer = BranchPolicySerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        policy = SettingsService.update_branch_policy(
            branch.id, serializer.validated_data, user=request.user
        )
        return Response(BranchPolicySerializer(policy).data)
