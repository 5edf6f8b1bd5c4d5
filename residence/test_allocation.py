from types import SimpleNamespace

from django.test import SimpleTestCase

from .exceptions import AllocationError
from .services.allocation import RoomCandidate, select_room_for_application


def candidate(room_id, hostel_id, room_no, capacity, occupants):
    return RoomCandidate(
        room_id=room_id,
        hostel_id=hostel_id,
        capacity=capacity,
        current_occupants=occupants,
        room_no=room_no,
    )


class RoomSelectionTest(SimpleTestCase):
    def setUp(self):
        self.rooms = [
            candidate(1, 10, 'A-101', 2, 2),
            candidate(2, 10, 'A-102', 3, 1),
            candidate(3, 20, 'B-201', 2, 0),
        ]

    def test_preferred_hostel_restricts_search(self):
        room_id = select_room_for_application(None, self.rooms, preferred_hostel_id=10)
        self.assertEqual(room_id, 2)

    def test_preference_read_from_application(self):
        application = SimpleNamespace(preferred_hostel_id=10)
        self.assertEqual(select_room_for_application(application, self.rooms), 2)

    def test_most_free_spots_wins_without_preference(self):
        rooms = self.rooms + [candidate(4, 20, 'B-202', 4, 0)]
        self.assertEqual(select_room_for_application(None, rooms), 4)

    def test_ties_go_to_smallest_room_number(self):
        rooms = [candidate(5, 20, 'B-210', 2, 0), candidate(6, 20, 'B-201', 2, 0)]
        self.assertEqual(select_room_for_application(None, rooms), 6)

    def test_full_preferred_hostel_falls_back_to_any_hostel(self):
        rooms = [candidate(1, 10, 'A-101', 2, 2), candidate(3, 20, 'B-201', 2, 1)]
        self.assertEqual(select_room_for_application(None, rooms, preferred_hostel_id=10), 3)

    def test_no_space_anywhere_raises(self):
        with self.assertRaises(AllocationError):
            select_room_for_application(None, [candidate(1, 10, 'A-101', 2, 2)])
        with self.assertRaises(AllocationError):
            select_room_for_application(None, [])
