from django.test import TestCase

from .forms import RegisterForm
from .models import Student, User


class RegisterFormTest(TestCase):
    def form_data(self, **overrides):
        data = {
            'username': 'testuser',
            'email': 'test@example.com',
            'first_name': 'Test',
            'last_name': 'User',
            'phone': '98765 43210',
            'reg_no': 'cs2024',
            'year_of_study': '1',
            'password1': 'abc12345',
            'password2': 'abc12345',
        }
        data.update(overrides)
        return data

    def test_password_mismatch(self):
        form = RegisterForm(data=self.form_data(password2='xyz789'))
        self.assertFalse(form.is_valid())
        self.assertIn('password2', form.errors)

    def test_registration_creates_student_account(self):
        form = RegisterForm(data=self.form_data())
        self.assertTrue(form.is_valid(), form.errors)
        user = form.save()

        self.assertEqual(user.role, User.STUDENT)
        self.assertEqual(user.phone, '9876543210')
        self.assertTrue(user.check_password('abc12345'))
        student = Student.objects.get(user=user)
        self.assertEqual(student.reg_no, 'CS2024')
        self.assertEqual(student.name, 'Test User')

    def test_registration_number_must_be_unique(self):
        Student.objects.create(name='Existing', reg_no='CS2024', year_of_study=2)
        form = RegisterForm(data=self.form_data())
        self.assertFalse(form.is_valid())
        self.assertIn('reg_no', form.errors)

    def test_phone_needs_ten_digits(self):
        form = RegisterForm(data=self.form_data(phone='12345'))
        self.assertFalse(form.is_valid())
        self.assertIn('phone', form.errors)
