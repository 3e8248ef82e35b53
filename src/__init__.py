"""
WAF-FLED Standings - Core Package

This package contains the core modules for:
- Tournament resolution and game ingestion (src.ingestion)
- Scoring, aggregation and ranking (src.scoring)
- The end-to-end pipeline (src.pipeline)
- Shared configuration and utilities
"""

from src.config import *
