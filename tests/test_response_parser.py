import json
import unittest

from resume_api.ai.types import AnalysisTask
from resume_api.analysis.fallbacks import ANALYZE_FALLBACK, COVER_LETTER_FALLBACK, MATCH_FALLBACK, fallback_for
from resume_api.analysis.parser import (
    ExtractionError,
    Fallback,
    GreedyBraceStrategy,
    Ok,
    ResponseParser,
    StrictJsonStrategy,
)

from fakes import FULL_SECTIONS

DEEPLY_NESTED = '{"content": ' + "[" * 100_000 + "]" * 100_000 + "}"


def _questions(category: str, count: int) -> list[dict[str, str]]:
    return [{"category": category, "question": f"{category} question {i}"} for i in range(count)]


class GreedyBraceStrategyTests(unittest.TestCase):
    def test_extracts_object_wrapped_in_prose(self):
        strategy = GreedyBraceStrategy()
        self.assertEqual(strategy.extract('Sure! Here you go: {"a":1} Hope that helps!'), {"a": 1})

    def test_takes_widest_span_for_nested_objects(self):
        strategy = GreedyBraceStrategy()
        text = 'Result:\n```json\n{"outer": {"inner": [1, 2]}}\n```'
        self.assertEqual(strategy.extract(text), {"outer": {"inner": [1, 2]}})

    def test_prose_braces_break_the_span(self):
        strategy = GreedyBraceStrategy()
        with self.assertRaises(ExtractionError) as ctx:
            strategy.extract('{"a": 1} and then {not json}')
        self.assertEqual(ctx.exception.reason, "invalid_json")

    def test_no_braces(self):
        with self.assertRaises(ExtractionError) as ctx:
            GreedyBraceStrategy().extract("I cannot comply.")
        self.assertEqual(ctx.exception.reason, "no_json_object")

    def test_excessive_nesting_is_invalid_json(self):
        for strategy in (GreedyBraceStrategy(), StrictJsonStrategy()):
            with self.assertRaises(ExtractionError) as ctx:
                strategy.extract(DEEPLY_NESTED)
            self.assertEqual(ctx.exception.reason, "invalid_json")


class ResponseParserTests(unittest.TestCase):
    def setUp(self):
        self.parser = ResponseParser()

    def test_garbage_match_output_falls_back(self):
        outcome = self.parser.parse(AnalysisTask.MATCH_JOB_DESCRIPTION, "I cannot comply.")
        self.assertIsInstance(outcome, Fallback)
        self.assertEqual(outcome.reason, "no_json_object")
        self.assertEqual(outcome.data["matchPercentage"], 60)
        self.assertEqual(len(outcome.data["matchedSkills"]), 3)
        self.assertEqual(outcome.data, MATCH_FALLBACK)

    def test_missing_sections_uses_analyze_fallback(self):
        raw = json.dumps({"atsScore": 90, "missingItems": [], "suggestions": []})
        outcome = self.parser.parse(AnalysisTask.ANALYZE, raw)
        self.assertIsInstance(outcome, Fallback)
        self.assertEqual(outcome.reason, "schema_violation")
        self.assertEqual(outcome.data, ANALYZE_FALLBACK)

    def test_missing_one_section_uses_fallback(self):
        sections = {k: v for k, v in FULL_SECTIONS.items() if k != "formatting"}
        raw = json.dumps({"atsScore": 90, "sections": sections, "missingItems": [], "suggestions": []})
        self.assertIsInstance(self.parser.parse(AnalysisTask.ANALYZE, raw), Fallback)

    def test_complete_analysis_is_ok(self):
        payload = {"atsScore": 72, "sections": FULL_SECTIONS, "missingItems": [], "suggestions": ["Add metrics"]}
        outcome = self.parser.parse(AnalysisTask.ANALYZE, "Here is the analysis:\n" + json.dumps(payload))
        self.assertIsInstance(outcome, Ok)
        self.assertEqual(outcome.data["atsScore"], 72)
        self.assertEqual(outcome.data["sections"]["skills"]["suggestions"], ["Tighten wording"])
        self.assertEqual(outcome.data["missingItems"], [])

    def test_scores_are_clamped_integers(self):
        sections = dict(FULL_SECTIONS)
        sections["skills"] = {"present": True, "score": 104.6}
        payload = {"atsScore": "71.6", "sections": sections, "missingItems": [], "suggestions": []}
        outcome = self.parser.parse(AnalysisTask.ANALYZE, json.dumps(payload))
        self.assertIsInstance(outcome, Ok)
        self.assertEqual(outcome.data["atsScore"], 72)
        self.assertEqual(outcome.data["sections"]["skills"]["score"], 100)
        self.assertEqual(outcome.data["sections"]["skills"]["issues"], [])

    def test_non_numeric_score_falls_back(self):
        payload = {
            "matchPercentage": "high",
            "matchedSkills": [],
            "missingSkills": [],
            "keywordGaps": [],
            "recommendations": [],
        }
        outcome = self.parser.parse(AnalysisTask.MATCH_JOB_DESCRIPTION, json.dumps(payload))
        self.assertIsInstance(outcome, Fallback)

    def test_malformed_json_falls_back(self):
        outcome = self.parser.parse(AnalysisTask.IMPROVE, '{"originalPoints": ["a",]')
        self.assertIsInstance(outcome, Fallback)
        self.assertEqual(outcome.reason, "invalid_json")
        self.assertTrue(outcome.data["downloadReady"])

    def test_improve_points_must_align(self):
        payload = {"originalPoints": ["a", "b"], "improvedPoints": ["A"], "summary": "s", "downloadReady": True}
        outcome = self.parser.parse(AnalysisTask.IMPROVE, json.dumps(payload))
        self.assertIsInstance(outcome, Fallback)
        self.assertEqual(outcome.reason, "schema_violation")

    def test_improve_download_ready_forced_true(self):
        payload = {"originalPoints": ["a"], "improvedPoints": ["A"], "summary": "s", "downloadReady": False}
        outcome = self.parser.parse(AnalysisTask.IMPROVE, json.dumps(payload))
        self.assertIsInstance(outcome, Ok)
        self.assertIs(outcome.data["downloadReady"], True)

    def test_interview_questions_keep_optional_hint_absent(self):
        payload = {
            "questions": [
                {"category": "HR", "question": "Why us?"},
                {"category": "technical", "question": "Explain indexes.", "hint": "Mention B-trees"},
                *_questions("hr", 2),
                *_questions("technical", 2),
                *_questions("situational", 3),
            ]
        }
        outcome = self.parser.parse(AnalysisTask.INTERVIEW_QUESTIONS, json.dumps(payload))
        self.assertIsInstance(outcome, Ok)
        first, second = outcome.data["questions"][:2]
        self.assertEqual(first, {"category": "hr", "question": "Why us?"})
        self.assertEqual(second["hint"], "Mention B-trees")
        self.assertEqual(len(outcome.data["questions"]), 9)

    def test_empty_interview_question_list_falls_back(self):
        outcome = self.parser.parse(AnalysisTask.INTERVIEW_QUESTIONS, '{"questions": []}')
        self.assertIsInstance(outcome, Fallback)
        self.assertEqual(outcome.reason, "schema_violation")
        self.assertEqual(outcome.data, fallback_for(AnalysisTask.INTERVIEW_QUESTIONS))

    def test_interview_category_below_three_falls_back(self):
        payload = {"questions": [*_questions("hr", 3), *_questions("technical", 4), *_questions("situational", 2)]}
        outcome = self.parser.parse(AnalysisTask.INTERVIEW_QUESTIONS, json.dumps(payload))
        self.assertIsInstance(outcome, Fallback)
        self.assertEqual(outcome.reason, "schema_violation")
        self.assertEqual(len(outcome.data["questions"]), 9)

    def test_unknown_question_category_falls_back(self):
        payload = {"questions": [{"category": "trivia", "question": "Favourite colour?"}]}
        outcome = self.parser.parse(AnalysisTask.INTERVIEW_QUESTIONS, json.dumps(payload))
        self.assertIsInstance(outcome, Fallback)
        self.assertEqual(len(outcome.data["questions"]), 9)

    def test_cover_letter_without_timestamp_is_ok(self):
        outcome = self.parser.parse(AnalysisTask.COVER_LETTER, '{"content": "Dear team"}')
        self.assertIsInstance(outcome, Ok)
        self.assertEqual(outcome.data, {"content": "Dear team"})

    def test_deeply_nested_cover_letter_falls_back(self):
        outcome = self.parser.parse(AnalysisTask.COVER_LETTER, DEEPLY_NESTED)
        self.assertIsInstance(outcome, Fallback)
        self.assertEqual(outcome.reason, "invalid_json")
        self.assertEqual(outcome.data, COVER_LETTER_FALLBACK)

    def test_cover_letter_placeholder_timestamp_is_dropped(self):
        raw = '{"content": "Dear team", "generatedAt": "<ISO date string>"}'
        outcome = self.parser.parse(AnalysisTask.COVER_LETTER, raw)
        self.assertIsInstance(outcome, Ok)
        self.assertEqual(outcome.data, {"content": "Dear team"})

    def test_cover_letter_iso_timestamp_is_kept(self):
        raw = '{"content": "Dear team", "generatedAt": "2024-05-01T09:30:00.000Z"}'
        outcome = self.parser.parse(AnalysisTask.COVER_LETTER, raw)
        self.assertEqual(outcome.data["generatedAt"], "2024-05-01T09:30:00.000Z")

    def test_json_array_is_not_an_object(self):
        outcome = self.parser.parse(AnalysisTask.COVER_LETTER, '[{"content": "Dear team"}]')
        self.assertIsInstance(outcome, Fallback)
        self.assertEqual(outcome.data, COVER_LETTER_FALLBACK)

    def test_strict_strategy_rejects_wrapped_json(self):
        parser = ResponseParser(strategy=StrictJsonStrategy())
        outcome = parser.parse(AnalysisTask.COVER_LETTER, 'Here: {"content": "Dear team"}')
        self.assertIsInstance(outcome, Fallback)
        self.assertEqual(outcome.reason, "invalid_json")


class FallbackPayloadTests(unittest.TestCase):
    def test_fallbacks_are_independent_copies(self):
        first = fallback_for(AnalysisTask.MATCH_JOB_DESCRIPTION)
        first["matchedSkills"].append("Mutated")
        self.assertEqual(len(fallback_for(AnalysisTask.MATCH_JOB_DESCRIPTION)["matchedSkills"]), 3)

    def test_every_fallback_satisfies_its_schema(self):
        parser = ResponseParser()
        for task in AnalysisTask:
            outcome = parser.parse(task, json.dumps(fallback_for(task)))
            self.assertIsInstance(outcome, Ok, task)
            self.assertEqual(outcome.data, fallback_for(task), task)

    def test_interview_fallback_has_three_per_category(self):
        questions = fallback_for(AnalysisTask.INTERVIEW_QUESTIONS)["questions"]
        for category in ("hr", "technical", "situational"):
            self.assertEqual(sum(1 for q in questions if q["category"] == category), 3)


if __name__ == "__main__":
    unittest.main()
