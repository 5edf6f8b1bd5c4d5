from datetime import timedelta
from decimal import Decimal

from django.test import SimpleTestCase
from django.utils import timezone

from .services.priority import (
    distance_points,
    performance_points,
    score_application,
    score_pending_applications,
    waiting_points,
)


class PriorityScoringTest(SimpleTestCase):
    def setUp(self):
        self.now = timezone.now()

    def test_senior_far_away_applicant_scores_high(self):
        scored = score_application(
            {
                'performance_type': 'sgpa',
                'performance_value': Decimal('8.5'),
                'distance_from_home': '25-50km',
                'created_at': self.now - timedelta(days=14),
                'academic_year': 4,
            },
            now=self.now,
        )
        self.assertEqual(scored.score, 71.5)
        self.assertEqual(scored.label, 'High')

    def test_rank_points_decrease_with_rank_and_are_capped(self):
        self.assertEqual(performance_points('keam_rank', 1), 40 - 1 / 1250)
        self.assertEqual(performance_points('rank', 50000), 0)
        self.assertEqual(performance_points('rank_keam', 90000), 0)
        self.assertEqual(performance_points('keam_rank', -5), 40)

    def test_unknown_performance_type_contributes_nothing(self):
        self.assertEqual(performance_points('cgpa', 9.1), 0)
        self.assertEqual(performance_points(None, 9.1), 0)
        self.assertEqual(performance_points('sgpa', 'not a number'), 0)

    def test_sgpa_is_clamped_to_ten(self):
        self.assertEqual(performance_points('SGPA', 12), 50)

    def test_distance_bands(self):
        self.assertEqual(distance_points('>50km'), 20)
        self.assertEqual(distance_points('25-50 KM'), 10)
        self.assertEqual(distance_points('<25km'), 0)
        self.assertEqual(distance_points('12'), 0)

    def test_waiting_bonus_floors_days_and_caps_at_thirty(self):
        self.assertEqual(waiting_points(self.now - timedelta(days=2, hours=23), self.now), 2)
        self.assertEqual(waiting_points(self.now - timedelta(days=90), self.now), 30)
        self.assertEqual(waiting_points(self.now + timedelta(days=1), self.now), 0)
        self.assertEqual(waiting_points(None, self.now), 0)

    def test_labels_follow_thresholds(self):
        low = score_application({'distance_from_home': '<25km', 'academic_year': 1}, now=self.now)
        medium = score_application({'distance_from_home': '>50km', 'academic_year': 4}, now=self.now)
        self.assertEqual((low.score, low.label), (0, 'Low'))
        self.assertEqual((medium.score, medium.label), (25, 'Medium'))

    def test_pending_list_sorted_by_score_then_age(self):
        older = {'distance_from_home': '>50km', 'created_at': self.now - timedelta(hours=5), 'academic_year': 1}
        newer = {'distance_from_home': '>50km', 'created_at': self.now - timedelta(hours=1), 'academic_year': 1}
        best = {'distance_from_home': '>50km', 'created_at': self.now, 'academic_year': 4}

        ordered = score_pending_applications([newer, best, older], now=self.now)

        self.assertEqual([item.application for item in ordered], [best, older, newer])
