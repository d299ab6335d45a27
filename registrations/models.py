"""
Database models for Yukti fest event registrations.
"""
from django.db import models, transaction
from django.db.models import Q
from django.db.models.functions import Lower


class EventConfig(models.Model):
    """
    Admin-configurable member limits per event.
    Events without an active config (or with max_members <= 1) are solo events.
    """
    key = models.CharField(max_length=64, unique=True, help_text="Event key sent by the frontend, e.g. roadies")
    name = models.CharField(max_length=200, help_text="Display name used in emails")
    min_members = models.PositiveSmallIntegerField(default=1)
    max_members = models.PositiveSmallIntegerField(default=1)
    is_active = models.BooleanField(default=True, help_text="Inactive configs are ignored (event treated as solo)")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['key']
        verbose_name = 'Event'
        verbose_name_plural = 'Events'

    def __str__(self):
        return f"{self.name} ({self.min_members}-{self.max_members})"

    @property
    def is_group(self):
        return self.max_members > 1

    @classmethod
    def for_event(cls, key):
        """Return the active config for an event key, or None."""
        if not key:
            return None
        return cls.objects.filter(key=key, is_active=True).first()


class RegistrationQuerySet(models.QuerySet):
    """
    Lookups used by the validation pipeline and unique ID assignment.
    """

    def for_identity(self, event, email, usns=()):
        """
        Registrations for `event` matching the email, or any of `usns` either as
        the solo USN or as a group member's USN.
        """
        usns = [u for u in usns if u]
        match = Q(email=email)
        if usns:
            match |= Q(usn__in=usns) | Q(members__usn__in=usns)
        return self.filter(event=event).filter(match).distinct()

    def with_transaction_id(self, transaction_id):
        return self.filter(transaction_id=transaction_id)

    def with_group_name(self, event, name):
        return self.filter(event=event, name__iexact=(name or '').strip())

    def missing_unique_id(self):
        return self.filter(Q(unique_id__isnull=True) | Q(unique_id=''))

    def unique_id_for_email(self, email):
        """Earliest unique ID already assigned to this email, or None."""
        return (
            self.filter(email=email)
            .exclude(unique_id__isnull=True)
            .exclude(unique_id='')
            .order_by('created_at')
            .values_list('unique_id', flat=True)
            .first()
        )


class RegistrationManager(models.Manager.from_queryset(RegistrationQuerySet)):

    def create_registration(self, cleaned, unique_id):
        """
        Persist a validated registration and its group members in one transaction.
        `cleaned` is a validation.CleanedRegistration.
        """
        with transaction.atomic():
            registration = self.create(
                unique_id=unique_id,
                event=cleaned.event,
                name=cleaned.name,
                usn='' if cleaned.is_group else cleaned.usn,
                college=cleaned.college,
                department=cleaned.department,
                year=cleaned.year,
                email=cleaned.email,
                phone=cleaned.phone,
                is_group=cleaned.is_group,
                transaction_id=cleaned.transaction_id,
                amount=cleaned.amount,
                payment_method=cleaned.payment_method,
            )
            if cleaned.is_group:
                GroupMember.objects.bulk_create([
                    GroupMember(
                        registration=registration,
                        event=cleaned.event,
                        name=member['name'],
                        usn=member['usn'],
                        position=position,
                    )
                    for position, member in enumerate(cleaned.members)
                ])
        return registration


class Registration(models.Model):
    """
    One registration of a person (solo) or a team (group) for one event.
    """
    # Shared by every registration made with the same email
    unique_id = models.CharField(
        max_length=40, blank=True, null=True, db_index=True,
        help_text="Generated ID e.g. YUKTI-2025-7FK3Z2QX, reused across events for the same email"
    )

    event = models.CharField(max_length=64, db_index=True)
    name = models.CharField(max_length=200, help_text="Participant name, or group name for group events")
    usn = models.CharField(max_length=32, blank=True, default='', help_text="Student USN (solo events only)")
    college = models.CharField(max_length=200)
    department = models.CharField(max_length=200)
    year = models.CharField(max_length=20)
    email = models.EmailField()
    phone = models.CharField(max_length=20)
    is_group = models.BooleanField(default=False)

    # Payment information
    transaction_id = models.CharField(max_length=100, unique=True)
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    payment_method = models.CharField(max_length=50, help_text="e.g. UPI, Card, Cash")

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    objects = RegistrationManager()

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Registration'
        verbose_name_plural = 'Registrations'
        constraints = [
            models.UniqueConstraint(
                fields=['event', 'email'],
                name='unique_registration_event_email',
            ),
            models.UniqueConstraint(
                fields=['event', 'usn'],
                condition=~Q(usn=''),
                name='unique_registration_event_usn',
            ),
            models.UniqueConstraint(
                Lower('name'), 'event',
                condition=Q(is_group=True),
                name='unique_group_name_per_event',
            ),
        ]

    def __str__(self):
        return f"{self.name} - {self.event} - {self.unique_id or 'no ID'}"

    def to_dict(self):
        """Serialize in the shape the admin frontend expects."""
        return {
            'id': self.pk,
            'uniqueId': self.unique_id,
            'event': self.event,
            'name': self.name,
            'USN': self.usn,
            'college': self.college,
            'department': self.department,
            'year': self.year,
            'email': self.email,
            'phone': self.phone,
            'members': [{'name': m.name, 'usn': m.usn} for m in self.members.all()],
            'payment': {
                'transactionId': self.transaction_id,
                'amount': float(self.amount),
                'method': self.payment_method,
            },
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }


class GroupMember(models.Model):
    """
    A member of a group registration. The event is copied from the registration
    so the database can reject the same USN twice within one event.
    """
    registration = models.ForeignKey(Registration, on_delete=models.CASCADE, related_name='members')
    event = models.CharField(max_length=64)
    name = models.CharField(max_length=200)
    usn = models.CharField(max_length=32)
    position = models.PositiveSmallIntegerField(default=0)

    class Meta:
        ordering = ['registration', 'position']
        constraints = [
            models.UniqueConstraint(
                fields=['event', 'usn'],
                name='unique_member_usn_per_event',
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.usn})"

