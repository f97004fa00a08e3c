"""
Prompt templates.

Two kinds of prompts are sent: one per text file asking for a short
technical summary of its diff, and a final one turning the combined
summaries into a commit message.
"""

from __future__ import annotations

from textwrap import dedent
from typing import Optional

from gitscribe.summary.models import DiffStats, FileStatus, PromptPair


USER_CONTEXT_MARKER = "USER CONTEXT:"

FILE_SUMMARY_SYSTEM_PROMPT = dedent(
    """
    You are an expert software engineer reviewing a single file's change.
    Summarize the unified diff you are given in one to three sentences.

    Cover, where the diff shows it:
    - the type of change (feature, fix, refactor, documentation, test, configuration)
    - the subsystem or component affected
    - the problem the change addresses
    - the key technical modification

    Answer in plain text only. Do not use markdown, headings, bullet points
    or code fences, and do not restate the file name.
    """
).strip()

COMMIT_SYSTEM_PROMPT = dedent(
    """
    You are an expert software engineer writing a Git commit message for
    the changes summarized below.

    Follow these rules:
    - The first line is a subject in the imperative mood ("Add", "Fix",
      "Refactor"), ideally 50 characters or fewer and never more than 72.
    - Do not end the subject with a period.
    - If the changes clearly belong to one subsystem, prefix the subject
      with it, e.g. "parser: Handle empty input".
    - Leave one blank line after the subject.
    - The body explains why the change was needed, what changed and how.
    - Wrap the body at 72 columns.
    - Use "- " bullet points when listing several distinct changes.

    Output ONLY the commit message as plain text: no preamble, no
    explanation, no markdown and no code fences.
    """
).strip()

CONTEXT_INSTRUCTION = dedent(
    f"""
    The summary starts with a block marked "{USER_CONTEXT_MARKER}" written by
    the author of the change. Treat it as the most reliable description of
    the intent and let it shape the subject and the body.
    """
).strip()


def build_file_summary_prompt(
    path: str,
    status: FileStatus,
    extension: str,
    stats: DiffStats,
    diff_text: str,
) -> PromptPair:
    """Return the prompt asking for a summary of one file's diff."""
    user_prompt = (
        f"File: {path}\n"
        f"Status: {status.value}\n"
        f"Extension: {extension or '(none)'}\n"
        f"Lines: +{stats.added} -{stats.removed} (~{stats.lines_changed} changed)\n"
        "\n"
        "Diff:\n"
        f"{diff_text}"
    )
    return PromptPair(system_prompt=FILE_SUMMARY_SYSTEM_PROMPT, user_prompt=user_prompt)


def build_commit_prompt(summary: str, context: Optional[str] = None) -> PromptPair:
    """Return the prompt asking for the final commit message.

    A non-empty ``context`` is placed before ``summary`` behind the
    ``USER CONTEXT:`` marker, and the system prompt is extended to give
    it priority.
    """
    system_prompt = COMMIT_SYSTEM_PROMPT
    body = summary
    if context and context.strip():
        system_prompt = f"{COMMIT_SYSTEM_PROMPT}\n\n{CONTEXT_INSTRUCTION}"
        body = f"{USER_CONTEXT_MARKER} {context}\n\n{summary}".rstrip()
    user_prompt = f"Summary of changes:\n\n{body}\n\nWrite the commit message now."
    return PromptPair(system_prompt=system_prompt, user_prompt=user_prompt)
