import unittest

from gitscribe.llm.prompts import (
    COMMIT_SYSTEM_PROMPT,
    USER_CONTEXT_MARKER,
    build_commit_prompt,
    build_file_summary_prompt,
)
from gitscribe.summary.models import DiffStats, FileStatus


class TestFileSummaryPrompt(unittest.TestCase):
    def test_embeds_diff_and_context(self) -> None:
        diff = "@@ -0,0 +1 @@\n+print('x')"
        prompt = build_file_summary_prompt(
            "tools/run.py", FileStatus.NEW, ".py", DiffStats(1, 1, 0), diff
        )
        self.assertIn("File: tools/run.py", prompt.user_prompt)
        self.assertIn("Status: New", prompt.user_prompt)
        self.assertIn("Extension: .py", prompt.user_prompt)
        self.assertIn("+1 -0", prompt.user_prompt)
        self.assertTrue(prompt.user_prompt.endswith(diff))

    def test_system_prompt_asks_for_plain_short_summary(self) -> None:
        prompt = build_file_summary_prompt("a", FileStatus.MODIFIED, "", DiffStats(), "+x")
        self.assertIn("one to three sentences", prompt.system_prompt)
        self.assertIn("code fences", prompt.system_prompt)
        self.assertIn("Extension: (none)", prompt.user_prompt)


class TestCommitPrompt(unittest.TestCase):
    def test_without_context(self) -> None:
        prompt = build_commit_prompt("New Files:\n- a.py: Adds a.")
        self.assertEqual(prompt.system_prompt, COMMIT_SYSTEM_PROMPT)
        self.assertIn("- a.py: Adds a.", prompt.user_prompt)
        self.assertNotIn(USER_CONTEXT_MARKER, prompt.user_prompt)

    def test_context_is_prefixed_with_marker(self) -> None:
        context = "Fixes the login timeout reported in #42"
        prompt = build_commit_prompt("Modified Files:\n- auth.py: Raises timeout.", context)
        self.assertIn(f"USER CONTEXT: {context}", prompt.user_prompt)
        self.assertLess(
            prompt.user_prompt.index(USER_CONTEXT_MARKER),
            prompt.user_prompt.index("Modified Files:"),
        )
        self.assertIn(USER_CONTEXT_MARKER, prompt.system_prompt)

    def test_blank_context_is_ignored(self) -> None:
        prompt = build_commit_prompt("summary", "   ")
        self.assertNotIn(USER_CONTEXT_MARKER, prompt.user_prompt)

    def test_style_rules(self) -> None:
        for rule in ("imperative", "72", "period", "blank line", "bullet"):
            with self.subTest(rule=rule):
                self.assertIn(rule, COMMIT_SYSTEM_PROMPT)


if __name__ == "__main__":
    unittest.main()
