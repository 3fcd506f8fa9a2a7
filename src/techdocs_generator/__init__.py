"""
TechDocs Generator package.

Provides:
- A fixed registry of documentation prompt templates
- An async client for the Gemini generateContent API
- A session controller driving one generation at a time
- FastAPI and command-line front ends
"""
