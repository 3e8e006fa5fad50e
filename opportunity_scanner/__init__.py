"""
Opportunity Scanner: asks Gemini for problem-heavy subreddits, scores the
business opportunities found in their pages, and keeps a history of results.
"""

__version__ = "0.1.0"
