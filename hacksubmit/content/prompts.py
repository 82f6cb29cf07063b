"""Prompt text for the submission content requests."""

from __future__ import annotations

README_SYSTEM_PROMPT = (
    "You are an assistant that writes detailed README files for GitHub repositories "
    "based on their codebase summaries."
)

STRUCTURED_README_PROMPT = (
    "Based on the following codebase summary, respond with a single JSON object and "
    "nothing else. The object must have exactly these string keys:\n"
    '- "projectName": a short, catchy name for the project\n'
    '- "briefDescription": one or two sentences describing the project, under 280 characters\n'
    '- "readmeContent": a comprehensive README for the repository in Markdown\n\n'
    "Codebase summary:\n\n{summary}"
)

PLAIN_README_PROMPT = (
    "Based on the following codebase summary, generate a comprehensive README file for "
    "the repository:\n\n{summary}"
)

DESCRIPTION_SYSTEM_PROMPT = (
    "You are an assistant that provides detailed descriptions of applications based on "
    "their codebase summaries."
)

DESCRIPTION_PROMPT = (
    "Based on the following codebase summary, provide a very detailed description of the "
    "full application:\n\n{summary}"
)

VIDEO_SCRIPT_SYSTEM_PROMPT = (
    "You write short, energetic scripts for hackathon demo videos."
)

VIDEO_SCRIPT_PROMPT = (
    "Write a narration script for a demo video of at most three minutes for the project "
    "\"{project_name}\". Describe what the viewer sees on screen for each step.\n\n"
    "Project description:\n\n{description}"
)

NO_README = "No README generated"
NO_DETAILED_DESCRIPTION = "No detailed description generated"
NO_VIDEO_SCRIPT = "No video script generated"
