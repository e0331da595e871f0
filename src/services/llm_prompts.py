"""LLM prompt templates for task descriptions and assignee ranking."""

DESCRIPTION_SYSTEM_PROMPT = (
    "You are a helpful assistant that creates clear, actionable task descriptions. "
    "Responses must not repeat the task title. Write concise but comprehensive descriptions "
    "with well-structured steps, expected deliverables, and success criteria. "
    "Do not use markdown. Separate each step with a blank line for readability."
)


def get_description_prompt(title: str) -> str:
    """Generate prompt for describing a task from its title."""
    return f'Generate a detailed description for this task: "{title}".'


RANKING_SYSTEM_PROMPT = "You are an expert recruiter."


def format_candidates(candidates: list) -> str:
    """Render retrieved resumes as numbered candidate blocks.

    Args:
        candidates: CandidateProfile instances from the resume search
    """
    blocks = []
    for idx, candidate in enumerate(candidates, start=1):
        blocks.append(
            f"Candidate {idx}:\n"
            f"Name: {candidate.name}\n"
            f"Email: {candidate.email}\n"
            f"Resume: {candidate.resume}"
        )
    return "\n\n".join(blocks)


def get_ranking_prompt(task_description: str, candidates: list, max_candidates: int = 3) -> str:
    """Generate prompt asking the model to pick the best-fit candidates."""
    return f"""You are an expert recruiter.

Given the following candidate resumes and the task description, choose the top {max_candidates} most suitable candidates at max from Candidate Resumes.
If no candidates are suitable, return an empty list.
If less than {max_candidates} candidates are suitable, return only those that are suitable.
Return ONLY a valid JSON array of their emails in this format:
[
  {{"email": "user1@gmail.com"}},
  {{"email": "user2@gmail.com"}},
  {{"email": "user3@gmail.com"}}
]

Task Description:
{task_description}

Candidate Resumes:
{format_candidates(candidates)}
"""
