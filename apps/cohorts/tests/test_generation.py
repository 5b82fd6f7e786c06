import io
import json
from datetime import date
from unittest.mock import patch

from django.core.management import CommandError, call_command
from django.test import SimpleTestCase, TestCase, override_settings
from django.utils import timezone

from academics.models import Course, Department, Program
from students.models import Enrollment, Student

from cohorts.analysis import analyze_batches, recommend
from cohorts.models import Batch
from cohorts.services import generate_batches
from imports.exceptions import InputError, TransactionFailure


class CohortTestCase(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.dept = Department.objects.create(code="CSE", name="Computer Science and Engineering")
        cls.program = Program.objects.create(code="CSE-BTECH", name="B.Tech CSE", department=cls.dept)
        cls.courses = {
            code: Course.objects.create(course_code=code, title=code, department=cls.dept, semester=1, credits=4)
            for code in ("CS101", "CS102", "MA101", "PH101")
        }

    def enroll_students(self, count, course_codes=("CS101", "CS102", "MA101", "PH101"), start=0,
                        year=2024, academic_year="2024-25", semester=1):
        students = Student.objects.bulk_create([
            Student(
                student_id=f"{year}U{start + i + 1:04d}",
                name=f"Student {start + i + 1}",
                email=f"s{year}{start + i + 1}@univ.edu",
                program=self.program,
                enrollment_year=year,
            )
            for i in range(count)
        ])
        students = list(Student.objects.filter(student_id__in=[s.student_id for s in students]))
        Enrollment.objects.bulk_create([
            Enrollment(
                student=student,
                course=self.courses[code],
                academic_year=academic_year,
                semester=semester,
                enrollment_date=date(2024, 8, 15),
            )
            for student in students
            for code in course_codes
        ])
        return students


class GenerateBatchesTests(CohortTestCase):
    def test_no_enrollments_reports_failure(self):
        run = generate_batches("2024-25", 1)

        self.assertFalse(run.success)
        self.assertEqual(run.message, "No student enrollments found for the specified academic year and semester")
        self.assertEqual(run.to_dict()["details"]["batchesCreated"], 0)
        self.assertFalse(Batch.objects.exists())

    def test_sixty_one_students_become_two_batches(self):
        self.enroll_students(61)

        run = generate_batches("2024-25", "1")

        self.assertTrue(run.success)
        self.assertEqual(run.batches_created, 2)
        self.assertEqual(run.students_processed, 61)
        b1 = Batch.objects.get(name="CSE-BTECH-2024-B1")
        b2 = Batch.objects.get(name="CSE-BTECH-2024-B2")
        self.assertEqual((b1.total_students, b2.total_students), (31, 30))
        self.assertEqual((b1.start_year, b1.end_year, b1.current_semester), (2024, 2028, 1))
        self.assertFalse(Student.objects.filter(batch__isnull=True).exists())
        self.assertEqual(b1.students.count(), 31)

    def test_result_lists_touched_batches(self):
        self.enroll_students(61)
        self.enroll_students(5, course_codes=("CS101",), start=61)

        details = generate_batches("2024-25", 1).to_dict()["details"]

        self.assertEqual(details["batchesCreated"], 3)
        self.assertEqual(details["totalStudentsProcessed"], 66)
        # signature "CS101" sorts before the four-course signature
        by_name = {b["name"]: b for b in details["batches"]}
        self.assertEqual(by_name["CSE-BTECH-2024-B1"]["actualStudentCount"], 5)
        self.assertTrue(by_name["CSE-BTECH-2024-B1"]["belowMinimum"])
        self.assertEqual(by_name["CSE-BTECH-2024-B2"]["actualStudentCount"], 31)
        self.assertFalse(by_name["CSE-BTECH-2024-B2"]["belowMinimum"])

    def test_rerun_is_idempotent(self):
        self.enroll_students(61)

        generate_batches("2024-25", 1)
        generate_batches("2024-25", 1)

        self.assertEqual(Batch.objects.count(), 2)
        self.assertEqual(
            sorted(Batch.objects.values_list("total_students", flat=True)),
            [30, 31],
        )

    def test_soft_deleted_students_are_excluded(self):
        students = self.enroll_students(21)
        Student.objects.filter(pk=students[0].pk).update(deleted_at=timezone.now())

        run = generate_batches("2024-25", 1)

        self.assertEqual(run.students_processed, 20)
        self.assertIsNone(Student.objects.get(pk=students[0].pk).batch)

    def test_other_terms_are_ignored(self):
        self.enroll_students(10, academic_year="2023-24")
        self.assertFalse(generate_batches("2024-25", 1).success)

    def test_missing_parameters(self):
        with self.assertRaisesMessage(InputError, "Academic year and semester are required"):
            generate_batches("", 1)
        with self.assertRaises(InputError):
            generate_batches("2024-25", "first")

    def test_failure_rolls_back_every_batch(self):
        self.enroll_students(61)

        with patch("cohorts.services.describe_batches", side_effect=RuntimeError("db gone")):
            with self.assertRaises(TransactionFailure):
                generate_batches("2024-25", 1)

        self.assertFalse(Batch.objects.exists())
        self.assertFalse(Student.objects.filter(batch__isnull=False).exists())

    @override_settings(BATCH_MAX_SIZE=10, BATCH_MIN_SIZE=5)
    def test_thresholds_come_from_settings(self):
        self.enroll_students(21)
        run = generate_batches("2024-25", 1)
        self.assertEqual([b["totalStudents"] for b in run.batches], [7, 7, 7])

    def test_generate_batches_command(self):
        self.enroll_students(25)
        out = io.StringIO()

        call_command("generate_batches", "--academic-year", "2024-25", "--semester", "1", stdout=out)

        self.assertIn("CSE-BTECH-2024-B1: 25 students", out.getvalue())
        self.assertIn("Batches=1", out.getvalue())


class BatchAnalysisTests(CohortTestCase):
    def test_distribution_and_recommendations(self):
        self.enroll_students(3, course_codes=("CS101", "CS102"))
        generate_batches("2024-25", 1)

        report = analyze_batches("2024-25", "1")

        self.assertTrue(report["success"])
        [row] = report["analysis"]["programDistribution"]
        self.assertEqual(row["programCode"], "CSE-BTECH")
        self.assertEqual(row["departmentCode"], "CSE")
        self.assertEqual(row["enrollmentYear"], 2024)
        self.assertEqual(row["totalStudents"], 3)
        self.assertEqual(row["uniqueCourses"], 2)
        self.assertEqual(row["courseList"], "CS101, CS102")
        self.assertEqual(row["avgCoursesPerStudent"], 2.0)

        [batch] = report["analysis"]["existingBatches"]
        self.assertEqual(batch["name"], "CSE-BTECH-2024-B1")
        self.assertEqual(batch["currentStudents"], 3)

        issues = {r["issue"]: r["priority"] for r in report["analysis"]["recommendations"]}
        self.assertEqual(issues, {"Small cohort": "medium", "Low course load": "high"})

    def test_average_rounds_to_two_places(self):
        self.enroll_students(2, course_codes=("CS101", "CS102"))
        self.enroll_students(1, course_codes=("CS101",), start=2)

        [row] = analyze_batches("2024-25", 1)["analysis"]["programDistribution"]

        self.assertEqual(row["avgCoursesPerStudent"], 1.67)

    def test_analyze_batches_command(self):
        self.enroll_students(2)
        out = io.StringIO()

        call_command("analyze_batches", "--academic-year", "2024-25", "--semester", "1", stdout=out)

        report = json.loads(out.getvalue())
        self.assertEqual(report["analysis"]["programDistribution"][0]["totalStudents"], 2)

    def test_analyze_requires_term(self):
        with self.assertRaises(InputError):
            analyze_batches("2024-25", None)
        with self.assertRaises(CommandError):
            call_command("analyze_batches", "--academic-year", " ", "--semester", "1")


class RecommendationRuleTests(SimpleTestCase):
    def row(self, total, avg):
        return {"programCode": "CSE-BTECH", "totalStudents": total, "avgCoursesPerStudent": avg}

    def test_large_cohort(self):
        [rec] = recommend([self.row(61, 5)])
        self.assertEqual(rec["issue"], "Large cohort")
        self.assertEqual(rec["suggestion"], "Split 61 students into 2 batches")
        self.assertEqual(rec["priority"], "high")

    def test_rules_are_independent(self):
        issues = [r["issue"] for r in recommend([self.row(130, 3)])]
        self.assertEqual(issues, ["Large cohort", "Low course load"])

    def test_healthy_cohort(self):
        self.assertEqual(recommend([self.row(40, 4)]), [])
