"""App-wide configuration objects for the Flask API."""

import os


def _env(name: str, default: str) -> str:
    return os.environ.get(f"CAREER_FINANCE_{name}", default)


class Config:
    TESTING = False

    CORS_ORIGINS = [
        origin.strip()
        for origin in _env("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
        if origin.strip()
    ]
    LOG_LEVEL = _env("LOG_LEVEL", "INFO")

    # comparison chart scenarios, as fractions
    LOW_RETURN_RATE = float(_env("LOW_RETURN_RATE", "0.03"))
    HIGH_RETURN_RATE = float(_env("HIGH_RETURN_RATE", "0.08"))

    CURRENCY_PREFIX = _env("CURRENCY_PREFIX", "NT$")


class TestingConfig(Config):
    TESTING = True
    LOG_LEVEL = "DEBUG"
