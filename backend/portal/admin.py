from django.contrib import admin

from .models import Application, ApplicationStatusChange, EmployerProfile, Job, UserAccount


@admin.register(UserAccount)
class UserAccountAdmin(admin.ModelAdmin):
    list_display = ['email', 'role', 'display_name', 'created_at']
    list_filter = ['role']
    search_fields = ['email', 'display_name', 'user__username']
    readonly_fields = ['id', 'firebase_uid', 'created_at', 'updated_at']


@admin.register(EmployerProfile)
class EmployerProfileAdmin(admin.ModelAdmin):
    list_display = ['user', 'industry', 'company_size', 'location', 'updated_at']
    search_fields = ['user__email', 'industry', 'location']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Job)
class JobAdmin(admin.ModelAdmin):
    list_display = ['title', 'company', 'employer', 'active', 'deadline', 'posted_at']
    list_filter = ['active', 'job_type']
    search_fields = ['title', 'company', 'employer__email']
    date_hierarchy = 'posted_at'


class StatusChangeInline(admin.TabularInline):
    model = ApplicationStatusChange
    extra = 0
    can_delete = False
    readonly_fields = ['old_status', 'new_status', 'feedback', 'changed_by', 'changed_at']

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Application)
class ApplicationAdmin(admin.ModelAdmin):
    """Read-only: status changes go through the API so every write is checked and notified."""
    list_display = ['id', 'job', 'applicant', 'status', 'applied_at', 'updated_at']
    list_filter = ['status']
    search_fields = ['job__title', 'job__company', 'applicant__email']
    readonly_fields = [
        'job', 'applicant', 'applied_at', 'cover_letter', 'resume_handle', 'resume_name',
        'resume_content_type', 'status', 'feedback', 'updated_at', 'version',
    ]
    inlines = [StatusChangeInline]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(ApplicationStatusChange)
class ApplicationStatusChangeAdmin(admin.ModelAdmin):
    list_display = ['application', 'old_status', 'new_status', 'changed_by', 'changed_at']
    list_filter = ['new_status']
    readonly_fields = ['application', 'old_status', 'new_status', 'feedback', 'changed_by', 'changed_at']

    def has_add_permission(self, request):
        return False
