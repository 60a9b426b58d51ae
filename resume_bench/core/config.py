"""
Runtime settings for the resume-bench service.

Values come from the environment (a local .env file is honoured).
"""

from dotenv import load_dotenv
load_dotenv()
import os

# Profile used by /parse when the request does not name one
DEFAULT_PROFILE = os.getenv("RESUME_BENCH_DEFAULT_PROFILE", "default")

LOG_LEVEL = os.getenv("RESUME_BENCH_LOG_LEVEL", "INFO").upper()

# Uploads above this size are rejected before text extraction (bytes)
MAX_UPLOAD_BYTES = int(os.getenv("RESUME_BENCH_MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))
