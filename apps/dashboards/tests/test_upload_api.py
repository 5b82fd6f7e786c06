import json
from tempfile import TemporaryDirectory

from django.contrib.auth.models import Group, User
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import Client, TestCase, override_settings

from academics.models import Department

TOKEN = "test-admin-token"
AUTH = {"HTTP_AUTHORIZATION": f"Bearer {TOKEN}"}


@override_settings(ADMIN_API_TOKENS=[TOKEN])
class UploadApiTests(TestCase):
    def setUp(self):
        self.client = Client()
        self._tmp = TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        media = override_settings(MEDIA_ROOT=self._tmp.name)
        media.enable()
        self.addCleanup(media.disable)

    def test_requires_token(self):
        resp = self.client.get("/api/upload/stats")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["message"], "Access denied. No token provided.")

        resp = self.client.get("/api/upload/stats", HTTP_AUTHORIZATION="Bearer wrong")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["message"], "Access denied. Admin only.")

    def test_logged_in_admins_pass(self):
        user = User.objects.create_user("registrar", password="x")
        self.client.force_login(user)
        self.assertEqual(self.client.get("/api/upload/stats").status_code, 401)

        user.groups.add(Group.objects.create(name="System Admin"))
        self.assertEqual(self.client.get("/api/upload/stats").status_code, 200)

    def test_upload_csv(self):
        upload = SimpleUploadedFile("departments.csv", b"Code,Name\nCSE,Computer Science\nECE,\n", content_type="text/csv")

        resp = self.client.post("/api/upload/departments", {"csvFile": upload}, **AUTH)

        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertTrue(data["success"])
        self.assertEqual(data["message"], "Successfully imported 1 departments")
        self.assertEqual(data["details"]["errors"], ["Row 3: Missing required fields (Name)"])
        self.assertTrue(Department.objects.filter(code="CSE").exists())

    def test_upload_rejects_non_csv(self):
        upload = SimpleUploadedFile("departments.xlsx", b"PK\x03\x04", content_type="application/octet-stream")

        resp = self.client.post("/api/upload/departments", {"csvFile": upload}, **AUTH)

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"success": False, "message": "Only CSV files are allowed"})

    def test_upload_rejects_non_utf8_csv(self):
        upload = SimpleUploadedFile("departments.csv", b"Code,Name\nCSE,Computer Science\nECE,\xff\xfe\n", content_type="text/csv")

        resp = self.client.post("/api/upload/departments", {"csvFile": upload}, **AUTH)

        self.assertEqual(resp.status_code, 400)
        self.assertFalse(resp.json()["success"])
        self.assertIn("not a valid UTF-8 CSV file", resp.json()["message"])
        self.assertFalse(Department.objects.exists())

    def test_upload_without_file(self):
        resp = self.client.post("/api/upload/departments", {}, **AUTH)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "No file uploaded")

    def test_upload_unknown_type(self):
        resp = self.client.post("/api/upload/widgets", {}, **AUTH)
        self.assertEqual(resp.status_code, 400)
        self.assertIn("students", resp.json()["availableTypes"])

    def test_templates(self):
        resp = self.client.get("/api/upload/templates/departments", **AUTH)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp["Content-Type"], "text/csv")
        self.assertIn('filename="departments_template.csv"', resp["Content-Disposition"])
        self.assertTrue(resp.content.startswith(b"Code,Name"))

        resp = self.client.get("/api/upload/templates/departments?format=xlsx", **AUTH)
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.content.startswith(b"PK"))

        resp = self.client.get("/api/upload/templates/widgets", **AUTH)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "Invalid template type")
        self.assertIn("academic_terms", resp.json()["availableTypes"])

    def test_stats(self):
        Department.objects.create(code="CSE", name="Computer Science")

        resp = self.client.get("/api/upload/stats", **AUTH)

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["stats"]["departments"], 1)


@override_settings(ADMIN_API_TOKENS=[TOKEN])
class BatchApiTests(TestCase):
    def setUp(self):
        self.client = Client()

    def post_json(self, url, payload):
        return self.client.post(url, data=json.dumps(payload), content_type="application/json", **AUTH)

    def test_generate_requires_term(self):
        resp = self.post_json("/api/upload/generate-batches", {})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "Academic year and semester are required")

    def test_generate_without_enrollments(self):
        resp = self.post_json("/api/upload/generate-batches", {"academicYear": "2024-25", "semester": 1})

        self.assertEqual(resp.status_code, 200)
        self.assertFalse(resp.json()["success"])

    def test_generate_accepts_form_body(self):
        resp = self.client.post(
            "/api/upload/generate-batches", {"academicYear": "2024-25", "semester": "1"}, **AUTH
        )
        self.assertEqual(resp.status_code, 200)

    def test_analysis(self):
        resp = self.client.get("/api/upload/batch-analysis/2024-25/1", **AUTH)

        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertTrue(data["success"])
        self.assertEqual(data["analysis"]["programDistribution"], [])
        self.assertEqual(data["analysis"]["recommendations"], [])

    def test_analysis_bad_semester(self):
        resp = self.client.get("/api/upload/batch-analysis/2024-25/first", **AUTH)
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(resp.json()["success"])
