import csv
import io

from django.test import SimpleTestCase

from imports.csv_templates import TEMPLATES
from imports.schemas import IMPORT_ORDER, SCHEMAS, HeaderMap, get_schema, resolve_fields


class FieldResolverTests(SimpleTestCase):
    def test_headers_match_ignoring_case_spacing_and_punctuation(self):
        schema = get_schema("academic_terms")
        headers = HeaderMap([" NAME ", "start_date", "End-Date", "academic year"], schema)

        resolved = headers.resolve({
            " NAME ": "Fall 2024",
            "start_date": "15-08-2024",
            "End-Date": "20-12-2024",
            "academic year": "2024-25",
        })

        self.assertEqual(resolved["name"], "Fall 2024")
        self.assertEqual(resolved["start_date"], "15-08-2024")
        self.assertEqual(resolved["end_date"], "20-12-2024")
        self.assertEqual(resolved["academic_year"], "2024-25")

    def test_absent_column_uses_default_or_none(self):
        resolved = resolve_fields({"Name": "Fall 2024"}, get_schema("academic_terms"))
        self.assertEqual(resolved["status"], "upcoming")
        self.assertIsNone(resolved["start_date"])

    def test_blank_cell_takes_default(self):
        resolved = resolve_fields({"Course Code": "CS101", "Course Type": "  "}, get_schema("courses"))
        self.assertEqual(resolved["course_type"], "theory")

    def test_aliases(self):
        resolved = resolve_fields({"Department": "Physics", "HOD Email": "hod@univ.edu"}, get_schema("departments"))
        self.assertEqual(resolved["name"], "Physics")
        self.assertEqual(resolved["hod_email"], "hod@univ.edu")

    def test_missing_lists_unmatched_columns(self):
        headers = HeaderMap(["Code", "Name"], get_schema("departments"))
        self.assertEqual(headers.missing, ["description", "hod_email"])

    def test_unknown_entity_type(self):
        self.assertIsNone(get_schema("widgets"))
        self.assertEqual(get_schema(" Students ").key, "students")


class SchemaContractTests(SimpleTestCase):
    def test_import_order_puts_dependencies_first(self):
        order = IMPORT_ORDER
        self.assertLess(order.index("departments"), order.index("programs"))
        self.assertLess(order.index("programs"), order.index("students"))
        self.assertLess(order.index("students"), order.index("student_enrollments"))
        self.assertLess(order.index("faculty"), order.index("course_assignments"))

    def test_every_template_header_covers_required_columns(self):
        for key, text in TEMPLATES.items():
            schema = SCHEMAS[key]
            header = next(csv.reader(io.StringIO(text)))
            headers = HeaderMap(header, schema)
            missing_required = [c.name for c in schema.required_columns if c.name in headers.missing]
            self.assertEqual(missing_required, [], key)

    def test_every_schema_has_a_template(self):
        self.assertEqual(set(TEMPLATES), set(SCHEMAS))
