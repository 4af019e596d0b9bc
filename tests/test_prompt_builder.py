import dataclasses
import unittest

from resume_api.ai.types import AnalysisTask
from resume_api.analysis.prompt import TaskInputs, build_prompt

RESUME = "Jane Doe\nPython engineer\n- Built data pipelines"
JD = "Backend engineer with Python and SQL"


class PromptBuilderTests(unittest.TestCase):
    def test_every_task_has_json_contract(self):
        for task in AnalysisTask:
            prompt = build_prompt(task, TaskInputs(resume_content=RESUME, job_description=JD))
            self.assertIn("Return ONLY valid JSON in this exact format", prompt.system_instruction, task)

    def test_analyze_contract_lists_all_keys(self):
        prompt = build_prompt(AnalysisTask.ANALYZE, TaskInputs(resume_content=RESUME))
        for key in ("atsScore", "sections", "skills", "experience", "education", "keywords", "formatting",
                    "missingItems", "suggestions"):
            self.assertIn(f'"{key}"', prompt.system_instruction)
        self.assertTrue(prompt.user_content.startswith("Analyze this resume for ATS compatibility:"))
        self.assertIn(RESUME, prompt.user_content)

    def test_match_embeds_resume_and_job_description(self):
        prompt = build_prompt(AnalysisTask.MATCH_JOB_DESCRIPTION, TaskInputs(resume_content=RESUME, job_description=JD))
        self.assertEqual(prompt.user_content, f"Resume:\n{RESUME}\n\nJob Description:\n{JD}")
        self.assertIn('"matchPercentage"', prompt.system_instruction)

    def test_interview_questions_without_job_description_omits_section(self):
        prompt = build_prompt(AnalysisTask.INTERVIEW_QUESTIONS, TaskInputs(resume_content=RESUME))
        self.assertEqual(prompt.user_content, f"Resume:\n{RESUME}")
        self.assertNotIn("Job Description", prompt.user_content)
        self.assertIn("at least 3 questions per category", prompt.system_instruction)

    def test_interview_questions_blank_job_description_omits_section(self):
        prompt = build_prompt(AnalysisTask.INTERVIEW_QUESTIONS, TaskInputs(resume_content=RESUME, job_description="  "))
        self.assertNotIn("Job Description", prompt.user_content)

    def test_cover_letter_without_resume(self):
        prompt = build_prompt(AnalysisTask.COVER_LETTER, TaskInputs(job_description=JD))
        self.assertEqual(prompt.user_content, f"Job Description:\n{JD}")
        self.assertIn('"generatedAt"', prompt.system_instruction)

    def test_improve_includes_previous_suggestions_as_json(self):
        inputs = TaskInputs(resume_content=RESUME, suggestions=["Add metrics", "Use action verbs"])
        prompt = build_prompt(AnalysisTask.IMPROVE, inputs)
        self.assertIn('Previous suggestions:\n["Add metrics", "Use action verbs"]', prompt.user_content)
        self.assertIn("Select 3-5 key bullet points", prompt.system_instruction)

    def test_improve_without_suggestions_omits_section(self):
        prompt = build_prompt(AnalysisTask.IMPROVE, TaskInputs(resume_content=RESUME))
        self.assertEqual(prompt.user_content, f"Resume to improve:\n{RESUME}")

    def test_prompt_payload_is_immutable(self):
        prompt = build_prompt(AnalysisTask.ANALYZE, TaskInputs(resume_content=RESUME))
        with self.assertRaises(dataclasses.FrozenInstanceError):
            prompt.user_content = "changed"  # type: ignore[misc]

    def test_messages_order(self):
        prompt = build_prompt(AnalysisTask.ANALYZE, TaskInputs(resume_content=RESUME))
        roles = [m.role for m in prompt.as_messages()]
        self.assertEqual(roles, ["system", "user"])


if __name__ == "__main__":
    unittest.main()
