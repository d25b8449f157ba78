import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# ========== DATABASE ==========
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./tesuto.db")

# ========== API ==========
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# ========== CLIENT ==========
API_URL = os.getenv("TESUTO_API_URL", "http://localhost:3001")
API_TIMEOUT = float(os.getenv("TESUTO_API_TIMEOUT", "10"))
SESSION_FILE = Path(
    os.getenv("TESUTO_SESSION_FILE", str(Path.home() / ".tesuto" / "session.json"))
).expanduser()

# ========== GENERATION ==========
GENERATION_DELAY = float(os.getenv("TESUTO_GENERATION_DELAY", "2.0"))
GENERATION_TIMEOUT = float(os.getenv("TESUTO_GENERATION_TIMEOUT", "10.0"))
