"""
Smart Search Backend Configuration
"""

import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Session Settings
HISTORY_LIMIT = int(os.getenv("HISTORY_LIMIT", "10"))   # executed searches kept per session
SESSION_LIMIT = int(os.getenv("SESSION_LIMIT", "500"))  # live in-memory sessions before eviction

# Spoonacular API Configuration
SPOONACULAR_API_KEY = os.getenv("SPOONACULAR_API_KEY", "")
SPOONACULAR_BASE_URL = os.getenv("SPOONACULAR_BASE_URL", "https://api.spoonacular.com")

# Retrieval Settings
RETRIEVAL_TIMEOUT = float(os.getenv("RETRIEVAL_TIMEOUT", "30"))
RETRIEVAL_MAX_RETRIES = 3
RETRIEVAL_RETRY_DELAY = 1.0
RETRIEVAL_CACHE_TTL = 300  # seconds
RETRIEVAL_CACHE_SIZE = 100
MAX_RESULTS = 10

# CORS - Frontend URLs
CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    os.getenv("FRONTEND_URL", ""),  # Production frontend URL
]
# Filter empty strings
CORS_ORIGINS = [origin for origin in CORS_ORIGINS if origin]
