"""Resume Matcher: tailor a structured resume to a job description."""

__version__ = "0.1.0"
