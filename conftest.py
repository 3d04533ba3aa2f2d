import os

os.environ.setdefault("LLM_API_KEY", "test-key")
os.environ.setdefault("IMAGE_STORE_BACKEND", "memory")
os.environ.setdefault("LOG_LEVEL", "DEBUG")
