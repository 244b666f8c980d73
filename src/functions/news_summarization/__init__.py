"""News article summarization service backed by Gemini."""
