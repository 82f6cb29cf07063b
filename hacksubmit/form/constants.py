"""Labels and selectors of the hackathon project submission form."""

from __future__ import annotations

SHORT_DESCRIPTION_LIMIT = 279

# Project creation dialog
CREATE_PROJECT_BUTTON = "Create Project"
PROJECT_NAME_PLACEHOLDER = "Project name"
CATEGORY_LABEL = "What category does your project belong to?"
EMOJI_LABEL = "What emoji best represents your project?"

# Project details section
SHORT_DESCRIPTION_PLACEHOLDER = "A short description of your project"
DESCRIPTION_PLACEHOLDER = "Describe your project in detail"
HOW_ITS_MADE_PLACEHOLDER = "How is it made?"
GITHUB_PLACEHOLDER = "https://github.com/..."
TECH_STACK_LABEL = "Which technologies did you use?"

# Media section
LOGO_INPUT = "input#logo"
COVER_INPUT = "input#cover-image"
SCREENSHOTS_INPUT = "input#screenshots"
VIDEO_INPUT = "input#demo-video"
UPLOAD_PROGRESS = "[role='progressbar']"

SAVE_AND_CONTINUE = "Save & Continue"

POLL_INTERVAL_MS = 2000
