"""Application configuration loaded from the environment (.env supported)"""
import os
from dotenv import load_dotenv

load_dotenv()

# === Storage ===
DATA_DIR = os.getenv("CALM_DATA_DIR", "")  # empty -> project-local ./data
STORAGE_NAMESPACE = os.getenv("CALM_STORAGE_NAMESPACE", "groq_therapy")

# === Completion endpoints ===
GROQ_URL = os.getenv("CALM_GROQ_URL", "https://api.groq.com/openai/v1/chat/completions")
PROXY_URL = os.getenv("CALM_PROXY_URL", "http://127.0.0.1:8787/api/groq")
# Empty means wait for the endpoint indefinitely
REQUEST_TIMEOUT = float(os.getenv("CALM_REQUEST_TIMEOUT") or 0) or None

# === Relay (server side of proxy mode) ===
RELAY_HOST = os.getenv("CALM_RELAY_HOST", "127.0.0.1")
RELAY_PORT = int(os.getenv("CALM_RELAY_PORT", 8787))
RELAY_UPSTREAM_URL = os.getenv("CALM_RELAY_UPSTREAM_URL", GROQ_URL)
GROQ_API_KEY = os.getenv("GROQ_API_KEY", "")

# === Logging ===
LOG_LEVEL = os.getenv("CALM_LOG_LEVEL", "INFO").upper()
