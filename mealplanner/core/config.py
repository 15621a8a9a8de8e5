import os
from pydantic import BaseModel
from dotenv import load_dotenv
from functools import lru_cache
from typing import List, Optional

load_dotenv()

DEFAULT_IMAGE = "https://images.unsplash.com/photo-1604329760661-e71dc83f8f26?w=400"


def _split_csv(value: str) -> List[str]:
    return [v.strip() for v in (value or "").split(",") if v.strip()]


class Settings(BaseModel):
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "Family Meal Planner API")
    SUPABASE_URL: Optional[str] = os.getenv("SUPABASE_URL")
    SUPABASE_KEY: Optional[str] = os.getenv("SUPABASE_KEY") or os.getenv("SUPABASE_ANON_KEY")
    SUPABASE_JWT_SECRET: Optional[str] = os.getenv("SUPABASE_JWT_SECRET")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_AUDIENCE: str = os.getenv("JWT_AUDIENCE", "authenticated")
    APP_TIMEZONE: str = os.getenv("APP_TIMEZONE", "UTC")
    DEFAULT_MEAL_IMAGE_URL: str = os.getenv("DEFAULT_MEAL_IMAGE_URL", DEFAULT_IMAGE)
    CORS_ALLOW_ORIGINS: List[str] = _split_csv(os.getenv("CORS_ALLOW_ORIGINS", "")) or [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    MEALS_TABLE: str = os.getenv("MEALS_TABLE", "meals")
    USER_ROLES_TABLE: str = os.getenv("USER_ROLES_TABLE", "user_roles")
    WEEKLY_PLANS_TABLE: str = os.getenv("WEEKLY_PLANS_TABLE", "weekly_plans")


@lru_cache
def get_settings():
    return Settings()
