"""Prompt templates for quiz generation."""
from __future__ import annotations

from cloze_quizzer.models import BLANK_MARKER

QUIZ_PROMPT = """\
You are an expert quiz-making bot. Based on the following text, create a \
fill-in-the-blank quiz.

Instructions:
1. Find 5-7 key, important words in the text.
2. Replace each of those words in the full original text with "{blank}".
3. List the words you blanked out, in the *exact order* they appear in the text.

Return a JSON object *only*. Do not return any other text or markdown.
The JSON object must have exactly two keys:
  1. "quizText": the full original text, with the key words replaced by "{blank}".
  2. "answers": an array of strings with the blanked-out words, in order.

Example response:
{{
  "quizText": "The {blank} is the powerhouse of the {blank}.",
  "answers": ["mitochondria", "cell"]
}}

Here is the text to quiz:
"{text}"
"""


def build_quiz_prompt(text: str) -> str:
    return QUIZ_PROMPT.format(blank=BLANK_MARKER, text=text)
