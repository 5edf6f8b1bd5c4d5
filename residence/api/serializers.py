from rest_framework import serializers

from ..models import (
    AllotmentApplication,
    Fee,
    Hostel,
    MaintenanceRequest,
    Payment,
    Room,
    RoomAllotment,
    Student,
    User,
)


class UserSerializer(serializers.ModelSerializer):
    """Serializer exposing a user's public account information."""

    full_name = serializers.SerializerMethodField()
    student_id = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = (
            'id',
            'username',
            'email',
            'first_name',
            'last_name',
            'full_name',
            'role',
            'phone',
            'is_active',
            'student_id',
        )
        read_only_fields = fields

    def get_full_name(self, obj):
        return obj.get_full_name() or obj.username

    def get_student_id(self, obj):
        student = getattr(obj, 'student', None)
        return student.id if student else None


class StudentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Student
        fields = (
            'id',
            'user',
            'name',
            'reg_no',
            'year_of_study',
            'department',
            'gender',
            'phone',
            'category',
            'keam_rank',
            'sgpa',
            'distance_category',
            'backlogs',
        )
        read_only_fields = fields


class HostelSerializer(serializers.ModelSerializer):
    warden_username = serializers.CharField(source='warden.username', default=None, read_only=True)
    room_count = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = Hostel
        fields = (
            'id',
            'hostel_name',
            'hostel_type',
            'warden',
            'warden_username',
            'total_rooms',
            'location',
            'room_count',
        )
        read_only_fields = fields


class RoomSerializer(serializers.ModelSerializer):
    hostel_name = serializers.CharField(source='hostel.hostel_name', read_only=True)
    current_occupants = serializers.SerializerMethodField()

    class Meta:
        model = Room
        fields = ('id', 'hostel', 'hostel_name', 'room_no', 'capacity', 'status', 'current_occupants')
        read_only_fields = fields

    def get_current_occupants(self, obj):
        occupants = getattr(obj, 'current_occupants', None)
        return occupants if occupants is not None else obj.active_occupants()


class RoomAllotmentSerializer(serializers.ModelSerializer):
    student_name = serializers.CharField(source='student.name', read_only=True)
    room_no = serializers.CharField(source='room.room_no', read_only=True)
    hostel_name = serializers.CharField(source='room.hostel.hostel_name', read_only=True)

    class Meta:
        model = RoomAllotment
        fields = (
            'id',
            'student',
            'student_name',
            'room',
            'room_no',
            'hostel_name',
            'status',
            'allotment_date',
            'vacated_at',
        )
        read_only_fields = fields


class AllotmentApplicationSerializer(serializers.ModelSerializer):
    preferred_hostel_name = serializers.CharField(source='preferred_hostel.hostel_name', default=None, read_only=True)

    class Meta:
        model = AllotmentApplication
        fields = (
            'id',
            'user',
            'preferred_hostel',
            'preferred_hostel_name',
            'room_type_preference',
            'course',
            'academic_year',
            'performance_type',
            'performance_value',
            'distance_from_home',
            'distance_unit',
            'status',
            'reviewed_by',
            'reviewed_at',
            'rejection_reason',
            'allocated_room',
            'allocated_at',
            'created_at',
        )
        read_only_fields = fields


class ScoredApplicationSerializer(serializers.Serializer):
    """Flattens a scored pending application for the warden triage list."""

    def to_representation(self, instance):
        application = instance.application
        data = AllotmentApplicationSerializer(application, context=self.context).data
        data.update(
            {
                'applicant': application.user.get_full_name() or application.user.username,
                'priority_score': instance.score,
                'priority_label': instance.label,
                'days_since_applied': (self.context['now'] - application.created_at).days,
            }
        )
        return data


class MaintenanceRequestSerializer(serializers.ModelSerializer):
    room_no = serializers.CharField(source='room.room_no', default=None, read_only=True)
    hostel_name = serializers.CharField(source='room.hostel.hostel_name', default=None, read_only=True)

    class Meta:
        model = MaintenanceRequest
        fields = (
            'id',
            'category',
            'description',
            'priority',
            'status',
            'assigned_to',
            'request_date',
            'completion_date',
            'room_no',
            'hostel_name',
        )
        read_only_fields = fields


class PaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Payment
        fields = ('id', 'amount', 'method', 'reference', 'paid_at')
        read_only_fields = fields


class FeeSerializer(serializers.ModelSerializer):
    balance = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    is_overdue = serializers.SerializerMethodField()
    payments = PaymentSerializer(many=True, read_only=True)

    class Meta:
        model = Fee
        fields = (
            'id',
            'student',
            'amount',
            'paid_amount',
            'balance',
            'status',
            'due_date',
            'paid_at',
            'description',
            'is_overdue',
            'payments',
            'created_at',
        )
        read_only_fields = fields

    def get_is_overdue(self, obj):
        return obj.is_overdue()
