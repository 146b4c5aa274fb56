#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Increment Tracker - Dashboard Configuration
Settings of the JSON API, read from DASHBOARD_* environment variables

Version: 1.0.0
Date: 2026-10-19
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class DashboardSettings(BaseSettings):
    """JSON API settings"""

    APP_NAME: str = Field(
        default="Increment Tracker API",
        description="Application title shown in the OpenAPI schema"
    )

    VERSION: str = Field(
        default="1.0.0",
        description="API version"
    )

    ENVIRONMENT: str = Field(
        default="development",
        description="development/testing/production"
    )

    DEBUG: bool = Field(
        default=True,
        description="Expose /api/docs and log at DEBUG"
    )

    # ===== CORS =====

    ALLOWED_ORIGINS: str = Field(
        default="*",
        description="Comma-separated CORS origins"
    )

    # ===== VALIDATORS =====

    @field_validator('ENVIRONMENT')
    @classmethod
    def validate_environment(cls, v: str) -> str:
        allowed_envs = ['development', 'testing', 'production']
        if v.lower() not in allowed_envs:
            raise ValueError(f"ENVIRONMENT must be one of {allowed_envs}")
        return v.lower()

    @property
    def allowed_origins(self) -> List[str]:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(',') if origin.strip()]

    @property
    def docs_enabled(self) -> bool:
        return self.DEBUG and self.ENVIRONMENT != 'production'

    model_config = SettingsConfigDict(
        env_prefix="DASHBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

def get_settings() -> DashboardSettings:
    return DashboardSettings()
