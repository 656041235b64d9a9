"""Reviews pull request hunks with an OpenAI model and posts inline comments."""

__version__ = "1.0.0"
