"""ai-cli — text and image prompts across OpenAI, DeepSeek and Mistral."""

__version__ = "0.1.0"
