import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./salon.db")

# Availability engine
# Step between two candidate start times, in minutes
SLOT_GRANULARITY_MINUTES = int(os.getenv("SLOT_GRANULARITY_MINUTES", "15"))
# How many times a booking transaction is replayed after a serialization failure
BOOKING_TRANSACTION_RETRIES = int(os.getenv("BOOKING_TRANSACTION_RETRIES", "3"))
# PENDING bookings older than this are released by the worker
PENDING_BOOKING_HOLD_MINUTES = int(os.getenv("PENDING_BOOKING_HOLD_MINUTES", "10"))

# Public endpoints rate limits (requests per window)
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
SLOTS_RATE_LIMIT = int(os.getenv("SLOTS_RATE_LIMIT", "120"))
BOOKINGS_RATE_LIMIT = int(os.getenv("BOOKINGS_RATE_LIMIT", "20"))
RATE_LIMIT_WINDOW_SECONDS = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))

# Frontend origins allowed by CORS (booking site + dashboard)
ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    "http://localhost:3000,http://localhost:5173",
).split(",")
