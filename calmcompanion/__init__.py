"""CalmCompanion: personalized support chat backed by a Groq completion endpoint"""

__version__ = "0.1.0"
