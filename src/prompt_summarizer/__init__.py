"""
Prompt summarizer package.

Provides:
- YAML prompt templates rendered with caller text
- FastAPI summarization endpoint backed by an OpenAI-compatible chat API
- Command-line client with a local summary history
"""
