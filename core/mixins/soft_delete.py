# core/mixins/soft_delete.py

from django.db import models, transaction
from django.utils import timezone


class SoftDeleteMixin(models.Model):
    """Soft delete instead of actual deletion.

    A soft-deleted row is also deactivated, so anything filtering on
    ``is_active`` (slot generation, service point eligibility) stops seeing it.
    """
    is_active = models.BooleanField(default=True)
    deleted_at = models.DateTimeField(null=True, blank=True, editable=False)
    deleted_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        editable=False,
        related_name='deleted_%(class)ss'
    )

    def delete(self, *args, user=None, **kwargs):
        """Override delete to soft delete"""
        with transaction.atomic():
            self.is_active = False
            self.deleted_at = timezone.now()
            if user is not None and getattr(user, 'is_authenticated', False):
                self.deleted_by = user
            self.save(update_fields=['is_active', 'deleted_at', 'deleted_by'])

    class Meta:
        abstract = True
