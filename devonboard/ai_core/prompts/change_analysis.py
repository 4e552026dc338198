"""
Prompt: Documentation Change Analysis

Asks the LLM to rate how a documentation change affects an onboarding plan
and to propose replacement instructions for the affected steps. The response
is parsed into a ``Verdict`` (see change_classifier.py); the JSON schema is
appended to the prompt as format instructions.
"""

from textwrap import dedent

CHANGE_ANALYSIS_SYSTEM_PROMPT = dedent(
    """
    You are an expert at analyzing documentation changes and their impact on developer onboarding.

    Your task is to determine:
    1. How severe the change is (1-10)
    2. Which onboarding steps are affected
    3. Whether it is safe to update the affected steps automatically
    4. Updated instructions for each affected step

    ## Severity Scale

    - **1-3 Cosmetic**: typos, formatting, wording that does not change meaning
    - **4-6 Clarifying**: clarifications, additional details, extra examples
    - **7-9 Process-impacting**: changed procedure, new requirements, different commands
    - **10 Breaking**: critical change that requires a human to rework the onboarding

    ## Auto-Update Rules

    - Set `should_auto_update` to true ONLY if severity is below 7 AND the change is additive
    - A change is additive when it adds or clarifies guidance without removing any
    - Require manual review (false) if severity is 7 or higher OR the change removes content

    ## Important Reminders

    - `affected_step_titles` and every `step_title` MUST be copied exactly from the listed steps
    - Never invent steps that are not listed
    - `new_instructions` replaces the whole instructions text of the step, in markdown
    - Keep `summary` to one or two sentences
    """
).strip()

CHANGE_ANALYSIS_USER_PROMPT = dedent(
    """
    A documentation file has changed. Analyze the impact on onboarding.

    FILE PATH: {file_path}

    OLD CONTENT:
    {old_content}{old_truncation_note}

    NEW CONTENT:
    {new_content}{new_truncation_note}

    CURRENT ONBOARDING STEPS:
    {current_steps}

    {format_instructions}
    """
).strip()

TRUNCATION_NOTE = "\n... (truncated)"

# Characters of each step's instructions shown in the step listing
STEP_PREVIEW_CHARS = 100
