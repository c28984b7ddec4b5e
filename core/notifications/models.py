from django.conf import settings
from django.db import models


class Notification(models.Model):
    """In-app notification for a single user."""
    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='notifications'
    )
    type = models.CharField(max_length=60, db_index=True)
    title = models.CharField(max_length=200)
    message = models.TextField(blank=True)
    link = models.CharField(max_length=300, blank=True)
    is_read = models.BooleanField(default=False)
    related_employee = models.ForeignKey(
        'person.Employee',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='notifications'
    )
    related_run_id = models.BigIntegerField(
        null=True,
        blank=True,
        help_text="Offboarding run (or other request) this notification is about"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'notification'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['recipient', 'is_read'], name='notification_unread_idx'),
        ]

    def __str__(self):
        return f"{self.type} -> {self.recipient_id}: {self.title}"

    def mark_read(self):
        self.is_read = True
        self.save(update_fields=['is_read'])
