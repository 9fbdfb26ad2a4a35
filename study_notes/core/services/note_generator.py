"""Study-note generation: one LLM call over the extracted document text."""

import logging

from ..domain.exceptions import LLMConnectionError, LLMError
from ..ports import LLMPort

logger = logging.getLogger(__name__)

NOTES_SYSTEM_PROMPT = """You are an expert study assistant. Your task is to extract and organize KEY NOTES from study materials.

IMPORTANT INSTRUCTIONS:
1. Extract only the MOST IMPORTANT and KEY information
2. Organize notes with clear headings and subheadings
3. Use bullet points for key concepts
4. Highlight definitions, formulas, dates, names, and critical facts
5. Focus on information that would appear in exams
6. Remove redundant or less important information
7. Format with markdown (use # for headings, - for bullets, ** for emphasis)
8. Keep it concise but comprehensive
9. Structure: Main Topic -> Key Points -> Important Details

Example format:
# [Main Topic]
## Key Concept 1
- Important point 1
- Important point 2
- **Definition**: [key definition]

## Key Concept 2
- Important point 1
- **Formula/Date/Name**: [specific detail]"""

NOTES_USER_PROMPT = (
    "Extract and organize KEY NOTES from this study material. "
    "Focus on the most important information only:\n\n{text}"
)

TRUNCATION_MARKER = "\n\n[Content truncated for processing...]"


class NoteGenerator:
    """Turns document text into markdown study notes.

    Never raises for provider problems: when the LLM is unavailable the notes
    fall back to an excerpt of the source text with an explanatory footer.
    """

    def __init__(
        self,
        llm: LLMPort,
        input_limit: int = 8000,
        temperature: float = 0.3,
        max_tokens: int = 2000,
    ) -> None:
        self.llm = llm
        self.input_limit = input_limit
        self.temperature = temperature
        self.max_tokens = max_tokens

    def generate(self, text: str) -> str:
        if not self.llm.is_configured:
            logger.warning("OpenRouter API key not found. Using placeholder notes.")
            return (
                f"# Key Study Notes\n\n## Important Points\n\n{text[:500]}...\n\n"
                "*Note: AI note generation requires OpenRouter API key.*"
            )

        if len(text) > self.input_limit:
            prompt_text = text[: self.input_limit] + TRUNCATION_MARKER
        else:
            prompt_text = text

        messages = [
            {"role": "system", "content": NOTES_SYSTEM_PROMPT},
            {"role": "user", "content": NOTES_USER_PROMPT.format(text=prompt_text)},
        ]

        try:
            notes = self.llm.generate(
                messages, temperature=self.temperature, max_tokens=self.max_tokens
            )
        except LLMConnectionError as e:
            logger.error("Error generating AI notes: %s", e.message)
            return (
                f"# Key Study Notes\n\n## Summary\n\n{text[:1500]}...\n\n"
                "*Note: Error generating AI notes. Showing text summary.*"
            )
        except LLMError as e:
            logger.error("Note generation failed: %s", e.message)
            return (
                f"# Key Study Notes\n\n## Summary\n\n{text[:1500]}...\n\n"
                "*Note: AI generation failed. Showing text summary.*"
            )

        if not notes or not notes.strip():
            logger.warning("AI returned empty notes, using fallback")
            return f"# Key Study Notes\n\n## Important Points\n\n{text[:1500]}..."

        logger.info("Generated notes (%d characters)", len(notes))
        return notes
