"""
Top-level package for gitscribe.

gitscribe summarizes the staged and unstaged changes of a Git
repository file by file and asks a language model (a local Ollama
server or Google Gemini) to turn those summaries into a commit
message. The command line entry point lives in :mod:`gitscribe.cli`.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
