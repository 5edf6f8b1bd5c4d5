from django.test import TestCase
from django.urls import reverse

from .models import Hostel, Student, User


class PageAccessTest(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.student_user = User.objects.create_user(username='stud', password='pass12345')
        Student.objects.create(user=cls.student_user, name='Stud', reg_no='P001', year_of_study=1)
        cls.warden = User.objects.create_user(username='ward', password='pass12345', role=User.WARDEN)
        cls.root = User.objects.create_user(username='root', password='pass12345', role=User.SUPERADMIN)
        Hostel.objects.create(hostel_name='Ganga', hostel_type='Boys', warden=cls.warden)

    def test_login_page_renders(self):
        response = self.client.get(reverse('login'))
        self.assertEqual(response.status_code, 200)

    def test_anonymous_users_are_sent_to_login(self):
        response = self.client.get(reverse('student_dashboard'))
        self.assertEqual(response.status_code, 302)
        self.assertIn(reverse('login'), response['Location'])

    def test_login_redirects_by_role(self):
        response = self.client.post(reverse('login'), {'username': 'ward', 'password': 'pass12345'})
        self.assertRedirects(response, reverse('dashboard'), target_status_code=302)
        response = self.client.get(reverse('dashboard'))
        self.assertRedirects(response, reverse('warden_dashboard'))

    def test_superadmin_lands_on_admin_panel(self):
        self.client.force_login(self.root)
        response = self.client.get(reverse('dashboard'))
        self.assertRedirects(response, reverse('admin_panel'))

    def test_students_cannot_open_warden_dashboard(self):
        self.client.force_login(self.student_user)
        response = self.client.get(reverse('warden_dashboard'))
        self.assertRedirects(response, reverse('dashboard'), fetch_redirect_response=False)

    def test_student_dashboard_renders(self):
        self.client.force_login(self.student_user)
        response = self.client.get(reverse('student_dashboard'))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Apply for a room')
        self.assertContains(response, 'Ganga')

    def test_warden_dashboard_lists_hostels(self):
        self.client.force_login(self.warden)
        response = self.client.get(reverse('warden_dashboard'))
        self.assertContains(response, 'Ganga')

    def test_register_page_creates_account(self):
        response = self.client.post(
            reverse('register'),
            {
                'username': 'newstudent',
                'reg_no': 'N001',
                'year_of_study': '2',
                'password1': 'pass12345',
                'password2': 'pass12345',
            },
        )
        self.assertRedirects(response, reverse('login'))
        self.assertTrue(Student.objects.filter(reg_no='N001', user__username='newstudent').exists())
