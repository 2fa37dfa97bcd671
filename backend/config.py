import os
from dotenv import load_dotenv

load_dotenv(override=False)

SQLALCHEMY_DATABASE_URL = os.getenv("SQLALCHEMY_DATABASE_URL", "sqlite:///./fitplan.db")

# Auth
JWT_SECRET = os.getenv("JWT_SECRET")  # Use a strong random string
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))

# LLM Selection Configuration
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "openrouter").lower()  # Options: ollama, openrouter, openai
LLM_API_KEY = os.getenv("LLM_API_KEY")
LLM_MODEL = os.getenv("LLM_MODEL")  # Optional override
OLLAMA_URL = os.getenv("OLLAMA_URL", "http://localhost:11434")

# Generation call policy
LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", "60"))
LLM_MAX_RETRIES = int(os.getenv("LLM_MAX_RETRIES", "2"))
LLM_RETRY_BACKOFF_SECONDS = float(os.getenv("LLM_RETRY_BACKOFF_SECONDS", "1.5"))

# Planner state storage
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "file").lower()  # Options: file, redis
STORAGE_PATH = os.getenv("STORAGE_PATH", os.path.join(os.path.expanduser("~"), ".fitplan", "storage.json"))
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

# Billing
STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY")
STRIPE_PRICE_ID = os.getenv("STRIPE_PRICE_ID")
STRIPE_WEBHOOK_SECRET = os.getenv("STRIPE_WEBHOOK_SECRET")
CLIENT_BASE_URL = os.getenv("CLIENT_BASE_URL", "http://localhost:5173")

# Client side
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:4242")
NOTIFICATION_DURATION_SECONDS = float(os.getenv("NOTIFICATION_DURATION_SECONDS", "5"))
EXPORT_DIR = os.getenv("EXPORT_DIR", ".")

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
