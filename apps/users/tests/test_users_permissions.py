"""Tests for the user model and the hostel permission classes."""

from __future__ import annotations

import uuid

from django.test import TestCase
from rest_framework.test import APIRequestFactory

from apps.users.models import User
from apps.users.permissions import HasHostel, IsHostelAdmin


class UserModelTests(TestCase):
    def test_create_user_defaults_to_resident(self) -> None:
        user = User.objects.create_user(email="Resident@Example.com", password="pass12345")

        self.assertEqual(user.role, User.RoleChoices.RESIDENT)
        self.assertEqual(user.email, "Resident@example.com")
        self.assertFalse(user.is_hostel_admin())
        self.assertTrue(user.check_password("pass12345"))

    def test_create_superuser_is_admin(self) -> None:
        user = User.objects.create_superuser(email="root@example.com", password="pass12345")

        self.assertEqual(user.role, User.RoleChoices.ADMIN)
        self.assertTrue(user.is_hostel_admin())

    def test_email_is_required(self) -> None:
        with self.assertRaises(ValueError):
            User.objects.create_user(email="", password="pass12345")

    def test_display_name_falls_back_to_email(self) -> None:
        user = User.objects.create_user(email="quiet@example.com", password="pass12345")

        self.assertEqual(user.display_name, "quiet@example.com")


class PermissionTests(TestCase):
    def setUp(self) -> None:
        self.factory = APIRequestFactory()
        self.hostel_id = uuid.uuid4()

    def _request(self, user):
        request = self.factory.get("/")
        request.user = user
        return request

    def test_hostel_admin_permission(self) -> None:
        admin = User.objects.create_user(
            email="warden@example.com", password="pass12345", role=User.RoleChoices.ADMIN
        )
        resident = User.objects.create_user(email="res@example.com", password="pass12345")
        staff = User.objects.create_user(email="staff@example.com", password="pass12345", is_staff=True)

        self.assertTrue(IsHostelAdmin().has_permission(self._request(admin), None))
        self.assertTrue(IsHostelAdmin().has_permission(self._request(staff), None))
        self.assertFalse(IsHostelAdmin().has_permission(self._request(resident), None))

    def test_has_hostel_permission(self) -> None:
        with_hostel = User.objects.create_user(
            email="in@example.com", password="pass12345", hostel_id=self.hostel_id
        )
        without = User.objects.create_user(email="out@example.com", password="pass12345")

        self.assertTrue(HasHostel().has_permission(self._request(with_hostel), None))
        self.assertFalse(HasHostel().has_permission(self._request(without), None))
