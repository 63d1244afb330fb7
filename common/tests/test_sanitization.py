from django.http import QueryDict
from django.test import SimpleTestCase

from common.sanitization import (
    clean_string,
    find_suspicious,
    sanitize_in_place,
    sanitize_querydict,
)


class CleanStringTests(SimpleTestCase):
    def test_script_block_removed(self):
        self.assertEqual(clean_string("Hi <script>alert(1)</script>there"), "Hi there")

    def test_script_block_case_insensitive(self):
        self.assertEqual(clean_string("<SCRIPT src=x>steal()</ScRiPt>ok"), "ok")

    def test_javascript_uri_removed(self):
        self.assertEqual(clean_string("javascript:alert(1)"), "alert(1)")

    def test_event_handler_removed(self):
        self.assertEqual(clean_string('<img src=x onerror="go()">'), '<img src=x "go()">')

    def test_plain_text_untouched(self):
        text = "Please ring the bell twice, gate code 1234."
        self.assertEqual(clean_string(text), text)


class SanitizeInPlaceTests(SimpleTestCase):
    def test_nested_dicts_and_lists_are_rewritten_in_place(self):
        body = {
            "message": "<script>x()</script>hello",
            "items": [{"note": "javascript:run()"}, "fine", 3],
            "count": 2,
        }
        changed = sanitize_in_place(body)

        self.assertEqual(body["message"], "hello")
        self.assertEqual(body["items"][0]["note"], "run()")
        self.assertEqual(body["items"][1], "fine")
        self.assertEqual(body["count"], 2)
        self.assertCountEqual(changed, [("message",), ("items", 0, "note")])

    def test_non_container_is_ignored(self):
        self.assertEqual(sanitize_in_place("<script></script>"), [])


class SanitizeQueryDictTests(SimpleTestCase):
    def test_returns_cleaned_immutable_copy(self):
        original = QueryDict("q=onload%3Dx&q=ok&page=2")
        cleaned, changed = sanitize_querydict(original)

        self.assertEqual(cleaned.getlist("q"), ["x", "ok"])
        self.assertEqual(cleaned["page"], "2")
        self.assertEqual(changed, ["q"])
        self.assertFalse(cleaned._mutable)
        self.assertEqual(original.getlist("q"), ["onload=x", "ok"])


class FindSuspiciousTests(SimpleTestCase):
    def test_reports_paths_of_suspicious_values(self):
        data = {"a": "1 UNION SELECT password", "b": {"c": "<b>bold</b>"}, "d": "plain"}
        found = dict(find_suspicious(data))
        self.assertIn(("a",), found)
        self.assertIn(("b", "c"), found)
        self.assertNotIn(("d",), found)

    def test_querydict_values_are_checked(self):
        found = list(find_suspicious(QueryDict("x=drop%20table%20orders")))
        self.assertEqual(found, [(("x",), "drop table orders")])
