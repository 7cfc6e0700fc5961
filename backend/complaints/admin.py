from django.contrib import admin

from .models import Complaint, SubZone, Ward


class SubZoneInline(admin.TabularInline):
    model = SubZone
    extra = 0


@admin.register(Ward)
class WardAdmin(admin.ModelAdmin):
    list_display = ("name", "is_active", "created_at")
    search_fields = ("name",)
    list_filter = ("is_active",)
    inlines = [SubZoneInline]


@admin.register(SubZone)
class SubZoneAdmin(admin.ModelAdmin):
    list_display = ("name", "ward", "is_active")
    search_fields = ("name", "ward__name")
    list_filter = ("is_active", "ward")


@admin.register(Complaint)
class ComplaintAdmin(admin.ModelAdmin):
    list_display = ("id", "type", "status", "priority", "ward",
                    "assigned_to", "submitted_on", "closed_on")
    search_fields = ("id", "type", "description", "contact_phone")
    list_filter = ("status", "priority", "ward")
    raw_id_fields = ("assigned_to", "submitted_by", "sub_zone")
    date_hierarchy = "submitted_on"
