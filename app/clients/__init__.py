"""Expose constructed client wrappers."""

from .github_auth import GitHubOAuthClient, OAuthStateEncoder
from .github_contents import GitHubContentsClient
from .llm import LLMClient

__all__ = [
    "GitHubContentsClient",
    "GitHubOAuthClient",
    "LLMClient",
    "OAuthStateEncoder",
]
