#!/usr/bin/env python3
"""
Core Module

Shared infrastructure for the eligibility service.

COMPONENTS:
    - config/: environment-driven configuration (python-dotenv + dataclasses)
    - logger.py: process-wide logging setup

USAGE:
    from core.config import get_eligibility_config
    from core.logger import setup_service_logger

    config = get_eligibility_config()
    logger = setup_service_logger("eligibility_service", level=config.log_level)
"""

__all__ = ["config", "logger"]

__version__ = "1.0.0"
