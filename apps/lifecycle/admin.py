from django.contrib import admin

from .models import ConsentRecord, LifecycleActionLog, NoteLifecycle


class ConsentRecordInline(admin.TabularInline):
    model = ConsentRecord
    extra = 0
    fields = ('family_member', 'kind', 'consented', 'auto_resolved', 'consented_at')
    readonly_fields = fields
    can_delete = False


@admin.register(NoteLifecycle)
class NoteLifecycleAdmin(admin.ModelAdmin):
    list_display = ('creator', 'status', 'deletion_status', 'death_reported_at', 'opened_at', 'updated_at')
    list_filter = ('status', 'deletion_status')
    search_fields = ('creator__email',)
    readonly_fields = ('status', 'deletion_status', 'created_at', 'updated_at')
    raw_id_fields = ('creator', 'death_reported_by', 'consent_initiated_by', 'deletion_initiated_by')
    inlines = [ConsentRecordInline]


@admin.register(ConsentRecord)
class ConsentRecordAdmin(admin.ModelAdmin):
    list_display = ('lifecycle', 'family_member', 'kind', 'consented', 'auto_resolved', 'consented_at')
    list_filter = ('kind', 'consented', 'auto_resolved')
    readonly_fields = ('created_at', 'consented_at')
    raw_id_fields = ('lifecycle', 'family_member')


@admin.register(LifecycleActionLog)
class LifecycleActionLogAdmin(admin.ModelAdmin):
    list_display = ('lifecycle', 'action', 'performed_by', 'created_at')
    list_filter = ('action', 'created_at')
    search_fields = ('lifecycle__creator__email', 'performed_by__email')
    readonly_fields = ('created_at',)
    raw_id_fields = ('lifecycle', 'performed_by')
    date_hierarchy = 'created_at'
