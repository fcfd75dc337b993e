from django.contrib import admin

from .models import AccessPreset, CategoryAccess


@admin.register(CategoryAccess)
class CategoryAccessAdmin(admin.ModelAdmin):
    list_display = ('family_member', 'creator', 'category_id', 'granted_by', 'granted_at')
    list_filter = ('category_id', 'granted_at')
    search_fields = ('creator__email', 'family_member__member__email')
    readonly_fields = ('granted_at',)
    raw_id_fields = ('creator', 'family_member', 'granted_by')


@admin.register(AccessPreset)
class AccessPresetAdmin(admin.ModelAdmin):
    list_display = ('family_member', 'creator', 'category_id', 'created_at')
    list_filter = ('category_id',)
    search_fields = ('creator__email', 'family_member__member__email')
    raw_id_fields = ('creator', 'family_member')
