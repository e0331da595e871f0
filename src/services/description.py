"""Task description suggestions with an LLM and a keyword fallback."""

import logging
from dataclasses import dataclass

from src.services.llm import LLMService
from src.services.llm_prompts import DESCRIPTION_SYSTEM_PROMPT, get_description_prompt

logger = logging.getLogger(__name__)

SOURCE_OPENAI = "openai"
SOURCE_FALLBACK = "fallback"

# Checked in order; the first keyword found in the title wins
FALLBACK_DESCRIPTIONS = {
    "setup": (
        "Initialize the project structure, configure necessary dependencies, and prepare "
        "the development environment for optimal workflow."
    ),
    "design": (
        "Create wireframes and mockups, define the user interface components, and establish "
        "the visual design system for consistency."
    ),
    "implement": (
        "Write the core functionality, integrate required APIs, and ensure proper error "
        "handling and validation throughout the system."
    ),
    "test": (
        "Develop comprehensive test cases, perform unit and integration testing, and validate "
        "all features work as expected."
    ),
    "deploy": (
        "Configure production environment, set up CI/CD pipeline, and ensure the application "
        "is ready for live deployment."
    ),
    "review": (
        "Conduct thorough code review, check for security vulnerabilities, and optimize "
        "performance for better user experience."
    ),
    "fix": (
        "Identify and resolve bugs, address user feedback, and implement necessary "
        "improvements to enhance functionality."
    ),
    "optimize": (
        "Analyze performance metrics, refactor inefficient code, and implement caching "
        "strategies for better system performance."
    ),
    "document": (
        "Create comprehensive documentation, write user guides, and ensure all code is "
        "properly commented for maintainability."
    ),
    "meeting": (
        "Prepare agenda items, gather necessary materials, and coordinate with team members "
        "to ensure productive discussion."
    ),
}

GENERIC_DESCRIPTION = (
    "Break this task into smaller, actionable steps. Define clear success criteria and "
    "identify any dependencies or resources needed to complete this work effectively."
)


def generate_fallback_description(title: str) -> str:
    """Pick a canned description by keyword."""
    lower_title = title.lower()
    for keyword, description in FALLBACK_DESCRIPTIONS.items():
        if keyword in lower_title:
            return description
    return GENERIC_DESCRIPTION


@dataclass
class DescriptionSuggestion:
    """Suggested description text and its origin."""

    text: str
    source: str


class DescriptionService:
    """Service for suggesting task descriptions."""

    def __init__(self, llm: LLMService):
        self.llm = llm

    async def suggest(self, title: str) -> DescriptionSuggestion:
        """Describe a task from its title; falls back to templates on any failure."""
        if self.llm.is_available():
            try:
                text = await self.llm.generate(
                    prompt=get_description_prompt(title),
                    system_prompt=DESCRIPTION_SYSTEM_PROMPT,
                    temperature=0.7,
                    max_tokens=200,
                )
                if text:
                    return DescriptionSuggestion(text=text, source=SOURCE_OPENAI)
                logger.warning(f"Empty description from LLM for '{title}'")
            except Exception as e:
                logger.error(f"LLM description failed: {e}")

        return DescriptionSuggestion(
            text=generate_fallback_description(title), source=SOURCE_FALLBACK
        )
