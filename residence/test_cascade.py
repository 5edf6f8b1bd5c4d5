from unittest import mock

from django.db import DatabaseError
from django.test import TestCase

from .exceptions import ConflictError, NotFoundError
from .models import AllotmentApplication, Hostel, MaintenanceRequest, Room, RoomAllotment, Student, User
from .services.allotment import AllotmentLifecycleService
from .services.cascade import CascadeDeletionService


class CascadeDeletionTest(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.user = User.objects.create_user(username='meera', password='pass12345')
        cls.student = Student.objects.create(user=cls.user, name='Meera', reg_no='EC010', year_of_study=2)
        cls.hostel = Hostel.objects.create(hostel_name='Kaveri', hostel_type='Girls')
        cls.room = Room.objects.create(hostel=cls.hostel, room_no='K-101', capacity=2)

    def setUp(self):
        self.service = CascadeDeletionService()
        self.lifecycle = AllotmentLifecycleService()

    def test_hostel_with_active_allotment_is_untouched(self):
        allotment = self.lifecycle.create_allotment(self.student.id, self.room.id)

        with self.assertRaisesMessage(ConflictError, 'Cannot delete hostel with active room allotments'):
            self.service.delete_hostel(self.hostel.id)

        self.assertTrue(Hostel.objects.filter(id=self.hostel.id).exists())
        self.assertTrue(Room.objects.filter(id=self.room.id).exists())
        self.assertTrue(RoomAllotment.objects.filter(id=allotment.id, status=RoomAllotment.ACTIVE).exists())

    def test_hostel_deletion_removes_dependents_and_detaches_applications(self):
        allotment = self.lifecycle.create_allotment(self.student.id, self.room.id)
        MaintenanceRequest.objects.create(student=self.student, room=self.room, category='Plumbing')
        self.lifecycle.vacate_allotment(allotment.id)
        application = AllotmentApplication.objects.create(
            user=self.user,
            preferred_hostel=self.hostel,
            allocated_room=self.room,
            room_type_preference='Double',
            course='B.Tech',
            academic_year=2,
            performance_type='cgpa',
            performance_value='8.10',
            distance_from_home='>50km',
            status=AllotmentApplication.ALLOCATED,
        )

        self.assertEqual(self.service.delete_hostel(self.hostel.id), {'ok': True})

        self.assertFalse(Hostel.objects.filter(id=self.hostel.id).exists())
        self.assertFalse(Room.objects.filter(id=self.room.id).exists())
        self.assertFalse(RoomAllotment.objects.exists())
        self.assertFalse(MaintenanceRequest.objects.exists())
        application.refresh_from_db()
        self.assertIsNone(application.preferred_hostel_id)
        self.assertIsNone(application.allocated_room_id)
        self.assertTrue(Student.objects.filter(id=self.student.id).exists())

    def test_room_with_active_allotment_cannot_be_deleted(self):
        self.lifecycle.create_allotment(self.student.id, self.room.id)
        with self.assertRaisesMessage(ConflictError, 'Cannot delete room with active allotments'):
            self.service.delete_room(self.room.id)
        self.assertTrue(Room.objects.filter(id=self.room.id).exists())

    def test_empty_room_is_deleted(self):
        self.assertEqual(self.service.delete_room(self.room.id), {'ok': True})
        self.assertFalse(Room.objects.filter(id=self.room.id).exists())
        self.assertTrue(Hostel.objects.filter(id=self.hostel.id).exists())

    def test_missing_hostel(self):
        with self.assertRaises(NotFoundError):
            self.service.delete_hostel(424242)

    def test_maintenance_cleanup_failure_does_not_block_hostel_deletion(self):
        allotment = self.lifecycle.create_allotment(self.student.id, self.room.id)
        self.lifecycle.vacate_allotment(allotment.id)
        request = MaintenanceRequest.objects.create(student=self.student, room=self.room, category='Electrical')

        with mock.patch('residence.services.cascade.MaintenanceRequest') as requests:
            requests.objects.filter.return_value.delete.side_effect = DatabaseError('disk I/O error')
            with self.assertLogs('residence.services.cascade', 'ERROR') as logs:
                self.assertEqual(self.service.delete_hostel(self.hostel.id), {'ok': True})

        self.assertIn('Could not remove maintenance requests', logs.output[0])
        self.assertFalse(Hostel.objects.filter(id=self.hostel.id).exists())
        self.assertFalse(Room.objects.filter(hostel_id=self.hostel.id).exists())
        self.assertFalse(RoomAllotment.objects.filter(id=allotment.id).exists())
        request.refresh_from_db()
        self.assertIsNone(request.room_id)
