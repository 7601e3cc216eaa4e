#!/usr/bin/env python3
"""Configuration for the eligibility service

Configuration hierarchy:
- eligibility_config: partner codes, plans, ledger, commerce API, transport, schedule
- logging_config: Logging configuration
"""
import os
from dotenv import load_dotenv
from .logging_config import LoggingConfig
from .eligibility_config import EligibilityConfig, parse_plan_prices

# Load environment file based on ENV
env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
env_files = {
    "development": "deployment/environments/dev.env",
    "dev": "deployment/environments/dev.env",
    "testing": "deployment/environments/test.env",
    "test": "deployment/environments/test.env",
    "staging": "deployment/environments/staging.env",
    "production": "deployment/environments/production.env",
}
env_file = env_files.get(env, "deployment/environments/dev.env")
load_dotenv(env_file, override=False)
load_dotenv(".env", override=False)

# Create global settings instance
settings = EligibilityConfig.from_env()

def get_eligibility_config() -> EligibilityConfig:
    """Get global settings instance"""
    return settings

def reload_eligibility_config() -> EligibilityConfig:
    """Reload settings from environment"""
    global settings
    settings = EligibilityConfig.from_env()
    return settings

__all__ = [
    'EligibilityConfig',
    'LoggingConfig',
    'get_eligibility_config',
    'reload_eligibility_config',
    'parse_plan_prices',
    'settings',
]
