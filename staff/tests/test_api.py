from datetime import date

from django.contrib.auth.models import User
from django.test import TestCase
from rest_framework.test import APIClient

from booking.models import Staff
from configmgr.models import Tenant
from staff.models import TimeOff, WorkingHours


class StaffRulesApiTests(TestCase):
    def setUp(self):
        self.tenant = Tenant.objects.create(slug="glow", name="Glow")
        self.other = Tenant.objects.create(slug="shine", name="Shine")
        self.s1 = Staff.objects.create(tenant=self.tenant, name="S1")
        self.outsider = Staff.objects.create(tenant=self.other, name="Outsider")

        User.objects.create_user(username="admin", password="pw", is_staff=True)
        self.client = APIClient()
        self.client.credentials(HTTP_X_TENANT_SLUG="glow")
        self.client.login(username="admin", password="pw")

    def test_create_working_hours(self):
        resp = self.client.post(
            "/api/staff/working-hours/",
            {"staff": self.s1.id, "day_of_week": 1, "start": "09:00", "end": "17:00"},
            format="json",
        )
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(WorkingHours.objects.get().end, "17:00")

    def test_rejects_inverted_window(self):
        resp = self.client.post(
            "/api/staff/breaks/",
            {"staff": self.s1.id, "day_of_week": 1, "start": "14:00", "end": "13:00"},
            format="json",
        )
        self.assertEqual(resp.status_code, 400)

    def test_rejects_bad_time_format(self):
        resp = self.client.post(
            "/api/staff/working-hours/",
            {"staff": self.s1.id, "day_of_week": 1, "start": "9am", "end": "17:00"},
            format="json",
        )
        self.assertEqual(resp.status_code, 400)

    def test_hours_may_end_at_midnight(self):
        resp = self.client.post(
            "/api/staff/working-hours/",
            {"staff": self.s1.id, "day_of_week": 5, "start": "18:00", "end": "24:00"},
            format="json",
        )
        self.assertEqual(resp.status_code, 201)

        for start, end in (("24:00", "24:00"), ("18:00", "24:30")):
            resp = self.client.post(
                "/api/staff/breaks/",
                {"staff": self.s1.id, "day_of_week": 5, "start": start, "end": end},
                format="json",
            )
            self.assertEqual(resp.status_code, 400)

    def test_cannot_touch_other_tenant_staff(self):
        resp = self.client.post(
            "/api/staff/time-off/",
            {"staff": self.outsider.id, "start_date": "2030-06-01", "end_date": "2030-06-02"},
            format="json",
        )
        self.assertEqual(resp.status_code, 400)

        TimeOff.objects.create(staff=self.outsider, start_date=date(2030, 6, 1), end_date=date(2030, 6, 2))
        self.assertEqual(self.client.get("/api/staff/time-off/").json(), [])

    def test_custom_schedule_intervals_validated(self):
        ok = self.client.post(
            "/api/staff/custom-schedule/",
            {"staff": self.s1.id, "date": "2030-06-03", "intervals": [{"start": "10:00", "end": "12:00"}]},
            format="json",
        )
        self.assertEqual(ok.status_code, 201)

        bad = self.client.post(
            "/api/staff/custom-schedule/",
            {"staff": self.s1.id, "date": "2030-06-04", "intervals": [{"start": "12:00", "end": "10:00"}]},
            format="json",
        )
        self.assertEqual(bad.status_code, 400)

    def test_time_off_end_before_start(self):
        resp = self.client.post(
            "/api/staff/time-off/",
            {"staff": self.s1.id, "start_date": "2030-06-05", "end_date": "2030-06-01"},
            format="json",
        )
        self.assertEqual(resp.status_code, 400)

    def test_anonymous_is_refused(self):
        anonymous = APIClient()
        anonymous.credentials(HTTP_X_TENANT_SLUG="glow")
        self.assertIn(anonymous.get("/api/staff/working-hours/").status_code, (401, 403))
