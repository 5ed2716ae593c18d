"""Runtime configuration for IdeaHub, read from the environment."""
import os

# Remote store selection: "local" (SQLAlchemy) or "rest" (PostgREST-compatible backend)
STORE_BACKEND = os.getenv("IDEAS_STORE_BACKEND", "local")

# Local store
DATABASE_URL = os.getenv("IDEAS_DATABASE_URL", "sqlite:///./ideahub.db")
UPLOAD_DIR = os.getenv("IDEAS_UPLOAD_DIR", "./uploads")
FILES_URL_PREFIX = "/files"

# Hosted backend
STORE_URL = os.getenv("IDEAS_STORE_URL", "http://localhost:54321")
STORE_API_KEY = os.getenv("IDEAS_STORE_API_KEY", "")
STORAGE_BUCKET = os.getenv("IDEAS_STORAGE_BUCKET", "attachments")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "10"))

# JWT Configuration
SECRET_KEY = os.getenv("JWT_SECRET_KEY", "your-secret-key-change-in-production")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

# Application
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
PORT = int(os.getenv("PORT", "8000"))
ENV = os.getenv("ENV", "development")
