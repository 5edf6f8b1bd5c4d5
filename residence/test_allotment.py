import threading

from django.db import IntegrityError, connection, transaction
from django.test import TestCase, TransactionTestCase
from django.utils import timezone

from .exceptions import ConflictError, NotFoundError, ValidationError
from .models import Hostel, Notification, Room, RoomAllotment, Student, User
from .services.allotment import AllotmentLifecycleService, recompute_room_status


class AllotmentLifecycleTest(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.user = User.objects.create_user(username='anu', password='pass12345', role=User.STUDENT)
        cls.student = Student.objects.create(user=cls.user, name='Anu', reg_no='CS001', year_of_study=2)
        cls.other = Student.objects.create(name='Bala', reg_no='CS002', year_of_study=3)
        cls.hostel = Hostel.objects.create(hostel_name='Periyar', hostel_type='Boys')
        cls.room = Room.objects.create(hostel=cls.hostel, room_no='A-101', capacity=2)
        cls.single = Room.objects.create(hostel=cls.hostel, room_no='A-102', capacity=1)

    def setUp(self):
        self.service = AllotmentLifecycleService()

    def test_round_trip_vacant_occupied_vacant(self):
        self.assertEqual(self.room.status, Room.VACANT)

        allotment = self.service.create_allotment(self.student.id, self.room.id)
        self.room.refresh_from_db()
        self.assertEqual(self.room.status, Room.OCCUPIED)

        self.service.vacate_allotment(allotment.id)
        self.room.refresh_from_db()
        self.assertEqual(self.room.status, Room.VACANT)
        self.assertFalse(RoomAllotment.objects.active().filter(student=self.student).exists())
        allotment.refresh_from_db()
        self.assertEqual(allotment.status, RoomAllotment.VACATED)
        self.assertIsNotNone(allotment.vacated_at)

    def test_second_allotment_for_student_is_rejected_without_side_effects(self):
        self.service.create_allotment(self.student.id, self.room.id)

        with self.assertRaises(ConflictError):
            self.service.create_allotment(self.student.id, self.single.id)

        self.assertEqual(RoomAllotment.objects.filter(student=self.student).count(), 1)
        self.single.refresh_from_db()
        self.assertEqual(self.single.status, Room.VACANT)

    def test_full_room_is_rejected(self):
        self.service.create_allotment(self.other.id, self.single.id)
        with self.assertRaises(ConflictError):
            self.service.create_allotment(self.student.id, self.single.id)
        self.assertEqual(self.single.active_occupants(), 1)

    def test_room_stays_occupied_until_last_occupant_leaves(self):
        first = self.service.create_allotment(self.student.id, self.room.id)
        self.service.create_allotment(self.other.id, self.room.id)

        self.service.vacate_allotment(first.id)
        self.room.refresh_from_db()
        self.assertEqual(self.room.status, Room.OCCUPIED)

    def test_room_under_maintenance_cannot_be_allotted(self):
        self.service.set_room_status(self.room.id, Room.UNDER_MAINTENANCE)
        with self.assertRaises(ConflictError):
            self.service.create_allotment(self.student.id, self.room.id)

    def test_unknown_student_or_room(self):
        with self.assertRaises(NotFoundError):
            self.service.create_allotment(9999, self.room.id)
        with self.assertRaises(NotFoundError):
            self.service.create_allotment(self.student.id, 9999)

    def test_vacating_twice_reports_missing_active_allotment(self):
        allotment = self.service.create_allotment(self.student.id, self.room.id)
        self.service.vacate_allotment(allotment.id)
        with self.assertRaisesMessage(NotFoundError, 'No active allotment found'):
            self.service.vacate_allotment(allotment.id)

    def test_recompute_keeps_empty_room_under_maintenance(self):
        Room.objects.filter(id=self.room.id).update(status=Room.UNDER_MAINTENANCE)
        room = recompute_room_status(self.room.id)
        self.assertEqual(room.status, Room.UNDER_MAINTENANCE)

    def test_vacating_last_occupant_keeps_maintenance_flag(self):
        allotment = self.service.create_allotment(self.student.id, self.room.id)
        Room.objects.filter(id=self.room.id).update(status=Room.UNDER_MAINTENANCE)

        self.service.vacate_allotment(allotment.id)

        self.room.refresh_from_db()
        self.assertEqual(self.room.status, Room.UNDER_MAINTENANCE)

    def test_occupied_room_cannot_be_flagged_for_maintenance(self):
        self.service.create_allotment(self.student.id, self.room.id)
        with self.assertRaises(ConflictError):
            self.service.set_room_status(self.room.id, Room.UNDER_MAINTENANCE)

    def test_leaving_maintenance_recomputes_status(self):
        self.service.set_room_status(self.room.id, Room.UNDER_MAINTENANCE)
        room = self.service.set_room_status(self.room.id, Room.OCCUPIED)
        self.assertEqual(room.status, Room.VACANT)

    def test_invalid_status_is_rejected(self):
        with self.assertRaises(ValidationError):
            self.service.set_room_status(self.room.id, 'Demolished')

    def test_bulk_vacate_soft_terminates_every_occupant(self):
        self.service.create_allotment(self.student.id, self.room.id)
        self.service.create_allotment(self.other.id, self.room.id)

        result = self.service.bulk_vacate_room(self.room.id)

        self.assertEqual(result, {'count': 2})
        self.assertEqual(RoomAllotment.objects.filter(room=self.room, status=RoomAllotment.REMOVED).count(), 2)
        self.room.refresh_from_db()
        self.assertEqual(self.room.status, Room.VACANT)

    def test_database_refuses_two_active_allotments(self):
        RoomAllotment.objects.create(student=self.student, room=self.room, allotment_date=timezone.now())
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                RoomAllotment.objects.create(student=self.student, room=self.single, allotment_date=timezone.now())

    def test_historical_allotments_do_not_block_new_ones(self):
        first = self.service.create_allotment(self.student.id, self.room.id)
        self.service.vacate_allotment(first.id)
        second = self.service.create_allotment(self.student.id, self.single.id)
        self.assertTrue(second.is_active)

    def test_notifications_sent_after_commit(self):
        with self.captureOnCommitCallbacks(execute=True):
            allotment = self.service.create_allotment(self.student.id, self.room.id)
        with self.captureOnCommitCallbacks(execute=True):
            self.service.vacate_allotment(allotment.id)

        titles = list(Notification.objects.filter(user=self.user).values_list('title', flat=True))
        self.assertCountEqual(titles, ['Room Allocated', 'Room Vacated'])

    def test_students_without_accounts_get_no_notifications(self):
        with self.captureOnCommitCallbacks(execute=True):
            self.service.create_allotment(self.other.id, self.room.id)
        self.assertFalse(Notification.objects.exists())


class ConcurrentAllotmentTest(TransactionTestCase):
    def setUp(self):
        self.student = Student.objects.create(name='Chitra', reg_no='CS050', year_of_study=1)
        hostel = Hostel.objects.create(hostel_name='Nila', hostel_type='Girls')
        self.rooms = [
            Room.objects.create(hostel=hostel, room_no='N-101', capacity=2),
            Room.objects.create(hostel=hostel, room_no='N-102', capacity=2),
        ]

    def test_racing_allotments_for_one_student_leave_one_winner(self):
        barrier = threading.Barrier(2, timeout=10)
        outcomes = []

        def allot(room):
            try:
                barrier.wait()
                AllotmentLifecycleService().create_allotment(self.student.id, room.id)
                outcomes.append('ok')
            except ConflictError:
                outcomes.append('conflict')
            finally:
                connection.close()

        threads = [threading.Thread(target=allot, args=(room,)) for room in self.rooms]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertCountEqual(outcomes, ['ok', 'conflict'])
        self.assertEqual(RoomAllotment.objects.active().filter(student=self.student).count(), 1)
