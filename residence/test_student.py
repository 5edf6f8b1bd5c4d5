from decimal import Decimal

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from .models import Fee, Hostel, IssueReport, MaintenanceRequest, Notification, Room, RoomAllotment, Student, User
from .services.maintenance import MaintenanceQueueService


class StudentSelfServiceAPITest(APITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.warden = User.objects.create_user(
            username='warden', password='pass12345', role=User.WARDEN, email='warden@example.com'
        )
        cls.user = User.objects.create_user(username='ammu', password='pass12345')
        cls.student = Student.objects.create(user=cls.user, name='Ammu', reg_no='BT011', year_of_study=2)
        cls.hostel = Hostel.objects.create(hostel_name='Sabari', hostel_type='Girls', warden=cls.warden)
        cls.room = Room.objects.create(hostel=cls.hostel, room_no='S-110', capacity=2, status=Room.OCCUPIED)
        RoomAllotment.objects.create(student=cls.student, room=cls.room, allotment_date=timezone.now())

    def setUp(self):
        self.client.force_authenticate(self.user)

    def test_maintenance_request_is_filed_against_current_room(self):
        response = self.client.post(
            reverse('maintenance_submit'),
            {'requestType': 'electrical fault', 'description': 'Fan not working', 'priority': 'urgent'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        request = MaintenanceRequest.objects.get(id=response.data['requestId'])
        self.assertEqual((request.category, request.priority, request.room), ('Electricity', 'High', self.room))

        response = self.client.get(reverse('maintenance_my_requests'))
        self.assertEqual(response.data[0]['room_no'], 'S-110')

    def test_maintenance_requires_an_allotment(self):
        RoomAllotment.objects.update(status=RoomAllotment.VACATED)
        response = self.client.post(reverse('maintenance_submit'), {'description': 'Leak'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_warden_queue_orders_by_priority(self):
        MaintenanceRequest.objects.create(student=self.student, room=self.room, priority='Low', category='Cleaning')
        MaintenanceRequest.objects.create(student=self.student, room=self.room, priority='High', category='Plumbing')
        queue = MaintenanceQueueService().queue()
        self.assertEqual([item['priority'] for item in queue], ['High', 'Low'])

    def test_expenses_accumulate_for_the_month(self):
        request = MaintenanceRequest.objects.create(student=self.student, room=self.room)
        self.client.force_authenticate(self.warden)
        url = reverse('warden_maintenance_expense', args=[request.id])
        self.client.post(url, {'amount': '250.50'}, format='json')
        response = self.client.post(url, {'amount': '100'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Decimal(str(response.data['monthTotal'])), Decimal('350.50'))

    def test_my_warden(self):
        response = self.client.get(reverse('student_my_warden'))
        self.assertEqual(response.data['data']['hostelName'], 'Sabari')
        self.assertEqual(response.data['data']['warden']['email'], 'warden@example.com')

    def test_notifications_include_room_and_announcements(self):
        Notification.objects.create(title='Water cut', message='No water on Sunday', notification_type='announcement')
        response = self.client.get(reverse('notifications_mine'))
        ids = [item['id'] for item in response.data]
        self.assertIn('current-room', ids)
        self.assertTrue(any(item['title'] == 'Water cut' for item in response.data))

    def test_mark_own_notification_read(self):
        mine = Notification.objects.create(user=self.user, title='Hi', message='Hello')
        response = self.client.post(reverse('notifications_read', args=[mine.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        mine.refresh_from_db()
        self.assertTrue(mine.is_read)

        theirs = Notification.objects.create(user=self.warden, title='Private', message='Not yours')
        response = self.client.post(reverse('notifications_read', args=[theirs.id]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_fees_with_totals(self):
        Fee.objects.create(student=self.student, amount=Decimal('5000'), paid_amount=Decimal('2000'), status='Partial')
        response = self.client.get(reverse('student_my_fees'))
        self.assertEqual(response.data['totals']['pending'], '3000.00')
        self.assertEqual(len(response.data['fees']), 1)

    def test_anonymous_issue_report_hides_reporter(self):
        response = self.client.post(
            reverse('issues_report'),
            {'category': 'Safety', 'description': 'Broken lock', 'location': 'Gate 2', 'anonymous': True},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        issue = IssueReport.objects.get()
        self.assertTrue(issue.is_anonymous)
        self.assertIsNone(issue.user_id)
        self.assertIsNone(issue.student_id)

    def test_recent_activity_lists_allocation(self):
        response = self.client.get(reverse('activity_recent'))
        self.assertEqual(response.data[0]['type'], 'allocation')

    def test_announcement_by_warden(self):
        self.client.force_authenticate(self.warden)
        response = self.client.post(
            reverse('warden_announcements'),
            {'title': 'Fire drill', 'message': 'Assemble at 5 PM'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        notification = Notification.objects.get(id=response.data['notificationId'])
        self.assertIsNone(notification.user_id)
        self.assertEqual(notification.notification_type, 'announcement')
