"""Browser automation for the submission form."""

from .driver import FormDriver, FormTimeoutError

__all__ = ["FormDriver", "FormTimeoutError"]
