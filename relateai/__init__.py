"""RelateAI - sales outreach CRM API and client."""

__version__ = "1.0.0"
