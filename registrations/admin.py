"""
Django admin configuration for registrations app.
"""
from django.contrib import admin
import csv
from django.http import HttpResponse
from .models import Registration, GroupMember, EventConfig
from .tasks import export_registration, retry_confirmation_email


class GroupMemberInline(admin.TabularInline):
    model = GroupMember
    fields = ['position', 'name', 'usn']
    readonly_fields = ['position', 'name', 'usn']
    extra = 0
    can_delete = False


@admin.register(Registration)
class RegistrationAdmin(admin.ModelAdmin):
    """
    Admin interface for browsing registrations.
    Includes filtering, search, and CSV export functionality.
    """
    list_display = [
        'unique_id', 'name', 'event', 'usn', 'college', 'email', 'phone',
        'transaction_id', 'amount', 'payment_method', 'created_at'
    ]
    list_filter = ['event', 'is_group', 'payment_method', 'created_at']
    search_fields = ['unique_id', 'name', 'usn', 'email', 'phone', 'transaction_id', 'members__usn']
    readonly_fields = ['unique_id', 'created_at']
    inlines = [GroupMemberInline]
    fieldsets = (
        ('Participant', {
            'fields': ('unique_id', 'event', 'name', 'usn', 'is_group')
        }),
        ('College', {
            'fields': ('college', 'department', 'year')
        }),
        ('Contact', {
            'fields': ('email', 'phone')
        }),
        ('Payment Information', {
            'fields': ('transaction_id', 'amount', 'payment_method', 'created_at')
        }),
    )

    actions = ['export_as_csv', 'requeue_followups']

    def export_as_csv(self, request, queryset):
        """
        Export selected registrations as CSV.
        """
        meta = self.model._meta
        field_names = [
            'unique_id', 'event', 'name', 'usn', 'college', 'department', 'year',
            'email', 'phone', 'transaction_id', 'amount', 'payment_method', 'created_at'
        ]

        response = HttpResponse(content_type='text/csv')
        response['Content-Disposition'] = f'attachment; filename={meta}.csv'
        writer = csv.writer(response)

        writer.writerow(field_names + ['members'])
        for obj in queryset.prefetch_related('members'):
            row = [getattr(obj, field) for field in field_names]
            row.append('; '.join(f"{m.name} ({m.usn})" for m in obj.members.all()))
            writer.writerow(row)

        return response

    export_as_csv.short_description = "Export selected registrations as CSV"

    def requeue_followups(self, request, queryset):
        """
        Queue the Excel export and confirmation email again for the selected registrations.
        """
        count = 0
        for registration_id in queryset.values_list('id', flat=True):
            export_registration(registration_id)
            retry_confirmation_email(registration_id, schedule=0)
            count += 1
        self.message_user(request, f"Queued export and email for {count} registration(s).")

    requeue_followups.short_description = "Re-run export and confirmation email"


@admin.register(EventConfig)
class EventConfigAdmin(admin.ModelAdmin):
    """
    Admin interface for managing event member limits.
    """
    list_display = ['key', 'name', 'min_members', 'max_members', 'is_active']
    list_filter = ['is_active']
    search_fields = ['key', 'name']
    fieldsets = (
        ('Event', {
            'fields': ('key', 'name', 'is_active')
        }),
        ('Team Size', {
            'fields': (('min_members', 'max_members'),)
        }),
    )

