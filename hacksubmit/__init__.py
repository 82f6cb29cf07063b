"""Clone a repository, draft its hackathon submission with an LLM, and fill the form."""

__version__ = "0.1.0"
