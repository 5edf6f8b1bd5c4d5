from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import (
	AllotmentApplication,
	Fee,
	Hostel,
	IssueReport,
	MaintenanceExpense,
	MaintenanceRequest,
	Notification,
	Payment,
	Room,
	RoomAllotment,
	Student,
	SystemSetting,
	User,
)


@admin.register(User)
class CustomUserAdmin(BaseUserAdmin):
	list_display = ('username', 'email', 'role', 'is_active', 'is_staff')
	list_filter = BaseUserAdmin.list_filter + ('role',)
	fieldsets = BaseUserAdmin.fieldsets + (
		('Hostel Role', {'fields': ('role', 'phone')}),
	)
	add_fieldsets = BaseUserAdmin.add_fieldsets + (
		(
			'Hostel Role',
			{
				'classes': ('wide',),
				'fields': ('role', 'phone'),
			},
		),
	)


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
	list_display = ('reg_no', 'name', 'year_of_study', 'department', 'gender')
	list_filter = ('year_of_study', 'gender', 'category')
	search_fields = ('reg_no', 'name', 'user__username')


@admin.register(Hostel)
class HostelAdmin(admin.ModelAdmin):
	list_display = ('hostel_name', 'hostel_type', 'warden', 'location')
	list_filter = ('hostel_type',)
	search_fields = ('hostel_name', 'location', 'warden__username')


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
	list_display = ('room_no', 'hostel', 'capacity', 'status')
	list_filter = ('status', 'hostel')
	search_fields = ('room_no', 'hostel__hostel_name')
	# Status follows allotments; edit it through the warden actions.
	readonly_fields = ('status',)


@admin.register(RoomAllotment)
class RoomAllotmentAdmin(admin.ModelAdmin):
	list_display = ('student', 'room', 'status', 'allotment_date', 'vacated_at')
	list_filter = ('status',)
	search_fields = ('student__reg_no', 'student__name', 'room__room_no')

	def has_add_permission(self, request):
		return False


@admin.register(AllotmentApplication)
class AllotmentApplicationAdmin(admin.ModelAdmin):
	list_display = ('user', 'preferred_hostel', 'academic_year', 'status', 'created_at')
	list_filter = ('status', 'academic_year')
	search_fields = ('user__username', 'course')


@admin.register(MaintenanceRequest)
class MaintenanceRequestAdmin(admin.ModelAdmin):
	list_display = ('student', 'room', 'category', 'priority', 'status', 'request_date')
	list_filter = ('status', 'priority', 'category')


admin.site.register(MaintenanceExpense)
admin.site.register(Notification)
admin.site.register(IssueReport)
admin.site.register(Fee)
admin.site.register(Payment)
admin.site.register(SystemSetting)
