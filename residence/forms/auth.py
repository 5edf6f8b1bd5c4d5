from django import forms
from django.db import transaction

from ..models import Student, User


class RegisterForm(forms.ModelForm):
    """Self-service sign-up for students; creates the account and its student record."""

    password1 = forms.CharField(label="Password", widget=forms.PasswordInput)
    password2 = forms.CharField(label="Confirm Password", widget=forms.PasswordInput)
    reg_no = forms.CharField(label="Registration Number", max_length=20)
    year_of_study = forms.TypedChoiceField(
        label="Year of Study",
        coerce=int,
        choices=[(year, str(year)) for year in range(1, 6)],
    )
    department = forms.CharField(max_length=100, required=False)
    gender = forms.ChoiceField(
        label="Gender",
        required=False,
        choices=[("", "Select gender")] + list(Student.GENDER_CHOICES),
    )

    class Meta:
        model = User
        fields = ["username", "email", "first_name", "last_name", "phone"]

    def clean(self):
        cleaned_data = super().clean()
        password1 = cleaned_data.get("password1")
        password2 = cleaned_data.get("password2")
        if password1 and password2 and password1 != password2:
            self.add_error("password2", "Passwords do not match.")
        return cleaned_data

    def clean_reg_no(self):
        reg_no = self.cleaned_data["reg_no"].strip().upper()
        if Student.objects.filter(reg_no=reg_no).exists():
            raise forms.ValidationError("A student with this registration number already exists.")
        return reg_no

    def clean_phone(self):
        phone = (self.cleaned_data.get("phone") or "").strip()
        if phone:
            digits_only = "".join(ch for ch in phone if ch.isdigit())
            if len(digits_only) != 10:
                raise forms.ValidationError("Phone number must contain exactly 10 digits.")
            phone = digits_only
        return phone

    def save(self, commit=True):
        user = super().save(commit=False)
        user.role = User.STUDENT
        user.set_password(self.cleaned_data["password1"])
        if commit:
            with transaction.atomic():
                user.save()
                Student.objects.create(
                    user=user,
                    name=user.get_full_name() or user.username,
                    reg_no=self.cleaned_data["reg_no"],
                    year_of_study=self.cleaned_data["year_of_study"],
                    department=self.cleaned_data.get("department") or "",
                    gender=self.cleaned_data.get("gender") or "",
                    phone=user.phone,
                )
        return user
