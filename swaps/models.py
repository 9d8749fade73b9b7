from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from accounts.models import Category

User = settings.AUTH_USER_MODEL


class SwapRequest(models.Model):
    OPEN = 'open'
    IN_PROGRESS = 'in_progress'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'
    STATUS_CHOICES = [
        (OPEN, 'Open'), (IN_PROGRESS, 'In Progress'),
        (COMPLETED, 'Completed'), (CANCELLED, 'Cancelled'),
    ]
    TERMINAL_STATUSES = (COMPLETED, CANCELLED)

    owner = models.ForeignKey(User, on_delete=models.CASCADE, related_name='swap_requests')
    service_title = models.CharField(max_length=200)
    service_categories = models.ManyToManyField(Category, blank=True, related_name='swap_requests')
    service_required = models.CharField(max_length=200, help_text="Service the owner wants in exchange")
    service_description = models.TextField(blank=True)
    years_of_experience = models.PositiveIntegerField(null=True, blank=True)
    preferred_location = models.CharField(max_length=200, blank=True, default='')
    deadline = models.DateTimeField(null=True, blank=True)
    contact_name = models.CharField(max_length=200, blank=True, default='')
    contact_email = models.EmailField(blank=True, default='')
    contact_phone = models.CharField(max_length=50, blank=True, default='')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=OPEN)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def approved_interaction(self):
        return self.interactions.filter(status=Interaction.APPROVED).first()

    def participant_ids(self):
        """Owner id and approved requester id (None while nobody is approved)."""
        approved = self.approved_interaction()
        return self.owner_id, (approved.requester_id if approved else None)

    def __str__(self):
        return self.service_title


class Interaction(models.Model):
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'
    STATUS_CHOICES = [(PENDING, 'Pending'), (APPROVED, 'Approved'), (REJECTED, 'Rejected')]
    ACTIVE_STATUSES = (PENDING, APPROVED)

    swap_request = models.ForeignKey(SwapRequest, on_delete=models.CASCADE, related_name='interactions')
    requester = models.ForeignKey(User, on_delete=models.CASCADE, related_name='placed_interactions')
    message = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    decided_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['-created_at', '-id']
        constraints = [
            # one live placement per (request, requester)
            models.UniqueConstraint(fields=['swap_request', 'requester'],
                                    condition=models.Q(status__in=['pending', 'approved']),
                                    name='unique_active_interaction'),
            # one approved partner per request
            models.UniqueConstraint(fields=['swap_request'],
                                    condition=models.Q(status='approved'),
                                    name='unique_approved_interaction'),
        ]

    def __str__(self):
        return f"{self.requester} -> {self.swap_request} ({self.status})"


class ProgressUpdate(models.Model):
    swap_request = models.ForeignKey(SwapRequest, on_delete=models.CASCADE, related_name='progress_updates')
    author = models.ForeignKey(User, on_delete=models.CASCADE, related_name='progress_updates')
    title = models.CharField(max_length=200, blank=True)
    message = models.TextField(blank=True)
    percentage = models.PositiveSmallIntegerField(validators=[MinValueValidator(0), MaxValueValidator(100)])
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at', 'id']

    def __str__(self):
        return f"{self.author} {self.percentage}% on {self.swap_request}"


class Notification(models.Model):
    """Bildirim sistemi"""
    NOTIFICATION_TYPES = [
        ('interaction_placed', 'Interaction Placed'),
        ('interaction_approved', 'Interaction Approved'),
        ('interaction_rejected', 'Interaction Rejected'),
        ('progress_update', 'Progress Update'),
        ('swap_completed', 'Swap Completed'),
        ('swap_cancelled', 'Swap Cancelled'),
        ('review_received', 'Review Received'),
    ]
    RECIPIENT_KINDS = [('user', 'User'), ('organization', 'Organization')]

    recipient_kind = models.CharField(max_length=20, choices=RECIPIENT_KINDS, default='user')
    recipient_id = models.PositiveBigIntegerField()
    notification_type = models.CharField(max_length=30, choices=NOTIFICATION_TYPES)
    message = models.TextField()
    status = models.CharField(max_length=20, blank=True, help_text="Status of the record the event is about")
    swap_request = models.ForeignKey(SwapRequest, on_delete=models.SET_NULL, null=True, blank=True, related_name='notifications')
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [models.Index(fields=['recipient_kind', 'recipient_id'], name='notification_recipient_idx')]

    def __str__(self):
        return f"{self.recipient_kind}:{self.recipient_id} - {self.notification_type}"


class Review(models.Model):
    swap_request = models.ForeignKey(SwapRequest, on_delete=models.CASCADE, related_name='reviews')
    reviewer = models.ForeignKey(User, on_delete=models.CASCADE, related_name='reviews_given')
    target_user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='reviews_received')
    rating = models.IntegerField(choices=[(i, i) for i in range(1, 6)], help_text="Rating from 1 to 5")
    comment = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        constraints = [
            models.UniqueConstraint(fields=['reviewer', 'swap_request'], name='unique_swap_review'),
        ]

    def __str__(self):
        return f"{self.reviewer} rated {self.target_user}: {self.rating}/5"
