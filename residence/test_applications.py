from datetime import timedelta

from django.test import TestCase
from django.utils import timezone

from .exceptions import AllocationError, ConflictError, ValidationError
from .models import AllotmentApplication, Hostel, Notification, Room, RoomAllotment, Student, User
from .services.applications import ApplicationReviewService, ApplicationSubmissionService
from .services.settings import SettingsService


def application_form(**overrides):
    data = {
        'course': 'B.Tech CSE',
        'yearOfStudy': '3',
        'academicScore': '8.4',
        'emergencyContactName': 'Lakshmi',
        'emergencyContactPhone': '9876543210',
        'homeAddress': 'Kollam, Kerala',
        'distanceFromHome': '>50km',
        'hostelPreference': 'Periyar',
        'roomType': 'Double',
    }
    data.update(overrides)
    return data


class ApplicationSubmissionTest(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.user = User.objects.create_user(username='rahul', password='pass12345')
        cls.student = Student.objects.create(user=cls.user, name='Rahul', reg_no='ME021', year_of_study=3)
        cls.hostel = Hostel.objects.create(hostel_name='Periyar', hostel_type='Boys')

    def test_submission_derives_performance_type_and_resolves_hostel(self):
        application = ApplicationSubmissionService(self.user).submit(application_form())

        self.assertEqual(application.status, AllotmentApplication.PENDING)
        self.assertEqual(application.performance_type, 'cgpa')
        self.assertEqual(application.preferred_hostel, self.hostel)
        self.assertEqual(application.guardian_name, 'Lakshmi')

    def test_first_years_are_ranked_by_keam(self):
        application = ApplicationSubmissionService(self.user).submit(
            application_form(yearOfStudy='1', academicScore='1520', hostelPreference=str(self.hostel.id))
        )
        self.assertEqual(application.performance_type, 'keam_rank')
        self.assertEqual(application.preferred_hostel, self.hostel)

    def test_missing_field_is_named(self):
        with self.assertRaises(ValidationError) as ctx:
            ApplicationSubmissionService(self.user).submit(application_form(homeAddress='  '))
        self.assertEqual(ctx.exception.field, 'homeAddress')

    def test_only_one_pending_application(self):
        service = ApplicationSubmissionService(self.user)
        service.submit(application_form())
        with self.assertRaises(ConflictError):
            service.submit(application_form())
        self.assertEqual(AllotmentApplication.objects.filter(user=self.user).count(), 1)

    def test_allotted_students_cannot_apply(self):
        room = Room.objects.create(hostel=self.hostel, room_no='P-101')
        RoomAllotment.objects.create(student=self.student, room=room, allotment_date=timezone.now())
        with self.assertRaisesMessage(ConflictError, 'already allocated'):
            ApplicationSubmissionService(self.user).submit(application_form())

    def test_users_without_student_record_cannot_apply(self):
        stranger = User.objects.create_user(username='guest', password='pass12345')
        with self.assertRaises(ValidationError):
            ApplicationSubmissionService(stranger).submit(application_form())

    def test_closed_applications(self):
        SettingsService().update({'application': {'applications_open': False}})
        with self.assertRaises(ConflictError):
            ApplicationSubmissionService(self.user).submit(application_form())


class ApplicationReviewTest(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.warden = User.objects.create_user(username='warden', password='pass12345', role=User.WARDEN)
        cls.user = User.objects.create_user(username='divya', password='pass12345')
        cls.student = Student.objects.create(user=cls.user, name='Divya', reg_no='CE033', year_of_study=4)
        cls.hostel = Hostel.objects.create(hostel_name='Nila', hostel_type='Girls', warden=cls.warden)
        cls.other_hostel = Hostel.objects.create(hostel_name='Bharathi', hostel_type='Girls')
        cls.room = Room.objects.create(hostel=cls.hostel, room_no='N-201', capacity=3)
        cls.other_room = Room.objects.create(hostel=cls.other_hostel, room_no='B-101', capacity=4)

    def setUp(self):
        self.service = ApplicationReviewService(self.warden)
        self.application = AllotmentApplication.objects.create(
            user=self.user,
            preferred_hostel=self.hostel,
            room_type_preference='Triple',
            course='B.Tech Civil',
            academic_year=4,
            performance_type='cgpa',
            performance_value='7.90',
            distance_from_home='25-50km',
        )

    def test_pending_list_is_scored(self):
        newcomer = User.objects.create_user(username='newbie', password='pass12345')
        AllotmentApplication.objects.create(
            user=newcomer,
            room_type_preference='Double',
            course='B.Tech',
            academic_year=1,
            performance_type='keam_rank',
            performance_value='100',
            distance_from_home='>50km',
        )
        AllotmentApplication.objects.filter(id=self.application.id).update(
            created_at=timezone.now() - timedelta(days=3)
        )

        scored = self.service.pending()

        self.assertEqual([item.application.user.username for item in scored], ['newbie', 'divya'])
        self.assertEqual(scored[1].score, 18.0)
        self.assertEqual(scored[1].label, 'Low')

    def test_plain_approval_records_reviewer(self):
        outcome = self.service.approve(self.application.id)

        self.assertIsNone(outcome.allotment)
        self.application.refresh_from_db()
        self.assertEqual(self.application.status, AllotmentApplication.APPROVED)
        self.assertEqual(self.application.reviewed_by, self.warden)
        self.assertIsNotNone(self.application.reviewed_at)

    def test_auto_allocation_uses_preferred_hostel(self):
        with self.captureOnCommitCallbacks(execute=True):
            outcome = self.service.approve(self.application.id, auto_allocate=True)

        self.assertEqual(outcome.allotment.room, self.room)
        self.application.refresh_from_db()
        self.assertEqual(self.application.status, AllotmentApplication.ALLOCATED)
        self.assertEqual(self.application.allocated_room, self.room)
        self.room.refresh_from_db()
        self.assertEqual(self.room.status, Room.OCCUPIED)
        self.assertTrue(Notification.objects.filter(user=self.user, title='Application Approved').exists())

    def test_approved_application_can_be_allocated_to_a_chosen_room(self):
        self.service.approve(self.application.id)
        outcome = self.service.approve(self.application.id, room_id=self.other_room.id)
        self.assertEqual(outcome.allotment.room, self.other_room)

    def test_allocation_without_space_leaves_application_pending(self):
        Room.objects.update(status=Room.UNDER_MAINTENANCE)
        with self.assertRaises(AllocationError):
            self.service.allocate(self.application.id)
        self.application.refresh_from_db()
        self.assertEqual(self.application.status, AllotmentApplication.PENDING)

    def test_reject_stores_reason_and_notifies(self):
        with self.captureOnCommitCallbacks(execute=True):
            self.service.reject(self.application.id, 'Incomplete documents')

        self.application.refresh_from_db()
        self.assertEqual(self.application.status, AllotmentApplication.REJECTED)
        self.assertEqual(self.application.rejection_reason, 'Incomplete documents')
        notification = Notification.objects.get(user=self.user)
        self.assertIn('Incomplete documents', notification.message)

    def test_finished_applications_cannot_be_reviewed_again(self):
        self.service.allocate(self.application.id)
        with self.assertRaises(ConflictError):
            self.service.reject(self.application.id)
        with self.assertRaises(ConflictError):
            self.service.allocate(self.application.id)
