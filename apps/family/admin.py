from django.contrib import admin

from .models import FamilyInvitation, FamilyMember


@admin.register(FamilyMember)
class FamilyMemberAdmin(admin.ModelAdmin):
    list_display = ('member', 'creator', 'relationship_label', 'role', 'is_active', 'created_at')
    list_filter = ('role', 'is_active', 'created_at')
    search_fields = ('creator__email', 'member__email', 'relationship_label')
    readonly_fields = ('created_at', 'updated_at')
    raw_id_fields = ('creator', 'member')


@admin.register(FamilyInvitation)
class FamilyInvitationAdmin(admin.ModelAdmin):
    list_display = ('creator', 'relationship_label', 'role', 'expires_at', 'accepted_at', 'accepted_by')
    list_filter = ('role', 'created_at')
    search_fields = ('creator__email', 'accepted_by__email')
    readonly_fields = ('token', 'created_at', 'accepted_at')
    raw_id_fields = ('creator', 'accepted_by')
