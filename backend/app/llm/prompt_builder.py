# File: backend/app/llm/prompt_builder.py
JOB_DESCRIPTION_PLACEHOLDER = "{{JOB_DESCRIPTION}}"
TEMPLATE_PLACEHOLDER = "{{TEMPLATE}}"


def build_prompt(job_description: str, template: str, prompt_profile: str) -> str:
    """
    Compose the tailoring prompt.

    Profiles that use the {{JOB_DESCRIPTION}} / {{TEMPLATE}} placeholders are filled in
    place. Profiles without placeholders get the job posting and template prepended.
    """
    replaced = prompt_profile.replace(JOB_DESCRIPTION_PLACEHOLDER, job_description).replace(
        TEMPLATE_PLACEHOLDER, template
    )
    if replaced != prompt_profile:
        return replaced

    return "".join([
        "Job posting Description:\n\n",
        job_description,
        "\n\nCandidate's latex resume template:\n\n",
        template,
        "\n\n",
        prompt_profile,
    ])


def build_job_info_prompt(job_description: str) -> str:
    return "\n".join([
        "Extract the company name, job title, and any job ID from this job description.",
        "Return JSON only with keys: company, title, id.",
        "Use empty string for missing values. Do not guess.",
        "",
        job_description,
    ])
