"""
Configuration settings for Boundary Mapper
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional
import os

from dotenv import load_dotenv
from loguru import logger


@dataclass
class APIConfig:
    """OSM API endpoints and request settings"""
    # OSM editing API v0.6 (serves XML, supports /relation/{id}/full)
    osm_api_url: str = "https://www.openstreetmap.org/api/0.6"

    # Request settings
    request_timeout: int = 30
    max_retries: int = 3
    retry_delay: float = 1.0

    # User agent for API requests (required by the OSM API usage policy)
    user_agent: str = "BoundaryMapper/1.0"


@dataclass
class GeometryConfig:
    """Ring reconstruction and center resolution settings"""
    # Endpoint keys are rounded to this many decimal digits (~0.11 m at 6)
    endpoint_precision: int = 6

    # Squared-distance tolerance for ring closure, in degrees
    close_tolerance_deg: float = 1e-6

    # Interior point search: t runs from start down to 0 in this many steps
    interior_search_start: float = 0.95
    interior_search_steps: int = 20

    # What to do with ways the stitch walk never reached: "append" or "hull"
    leftover_policy: str = "append"

    # Already-closed ways become rings of their own instead of being stitched
    split_closed_ways: bool = True


@dataclass
class PipelineConfig:
    """Pipeline configuration"""
    # Output settings
    output_dir: str = "output"
    cache_dir: Optional[str] = None

    # Default country for center points
    country: str = "VN"

    # Admin levels handled by the classifier
    province_level: int = 4
    commune_level: int = 6

    # Audit user recorded on generated records
    audit_user: str = "boundary-mapper"

    # API config
    api: APIConfig = field(default_factory=APIConfig)

    # Geometry config
    geometry: GeometryConfig = field(default_factory=GeometryConfig)

    # Human readable names per admin level
    level_names: Dict[int, str] = field(default_factory=lambda: {
        4: "province",
        6: "commune",
    })


# Global config instance
config = PipelineConfig()


def get_config() -> PipelineConfig:
    """Get global configuration"""
    return config


def load_config_from_env(env_path: Optional[str] = None) -> PipelineConfig:
    """
    Build a PipelineConfig, overriding defaults from environment variables.

    A .env file is loaded first (explicit path, then the project root, then the
    current directory). Existing environment variables are never overridden.
    """
    candidates = [Path(env_path)] if env_path else [
        Path(__file__).parent.parent / ".env",  # Project root
        Path.cwd() / ".env",
    ]
    for candidate in candidates:
        if candidate.exists():
            load_dotenv(candidate, override=False)
            logger.info(f"Loaded .env file from {candidate}")
            break
    else:
        logger.debug("No .env file found in common locations")

    cfg = PipelineConfig()
    cfg.api.osm_api_url = os.getenv("OSM_API_URL", cfg.api.osm_api_url)
    cfg.api.user_agent = os.getenv("OSM_USER_AGENT", cfg.api.user_agent)
    cfg.output_dir = os.getenv("BOUNDARY_OUTPUT_DIR", cfg.output_dir)
    cfg.cache_dir = os.getenv("BOUNDARY_CACHE_DIR", cfg.cache_dir)

    timeout = os.getenv("OSM_REQUEST_TIMEOUT")
    if timeout:
        cfg.api.request_timeout = int(timeout)
    retries = os.getenv("OSM_MAX_RETRIES")
    if retries:
        cfg.api.max_retries = int(retries)

    return cfg


def validate_config(config: PipelineConfig) -> None:
    """
    Validate that all required configuration values are set.
    Raises ValueError if any required value is missing or invalid.
    """
    errors = []

    if not config.output_dir:
        errors.append("output_dir is required in config but not set")

    if config.api is None:
        errors.append("api configuration is required but not set")
    else:
        if not config.api.osm_api_url:
            errors.append("api.osm_api_url is required but not set")
        if config.api.max_retries < 1:
            errors.append(f"api.max_retries must be at least 1, got {config.api.max_retries}")
        if config.api.request_timeout <= 0:
            errors.append(f"api.request_timeout must be positive, got {config.api.request_timeout}")

    if config.geometry is None:
        errors.append("geometry configuration is required but not set")
    else:
        geometry = config.geometry
        if geometry.leftover_policy not in ("append", "hull"):
            errors.append(f"geometry.leftover_policy must be 'append' or 'hull', got {geometry.leftover_policy!r}")
        if geometry.close_tolerance_deg <= 0:
            errors.append(f"geometry.close_tolerance_deg must be positive, got {geometry.close_tolerance_deg}")
        if geometry.interior_search_steps < 1:
            errors.append(f"geometry.interior_search_steps must be at least 1, got {geometry.interior_search_steps}")
        if not 0 < geometry.interior_search_start <= 1:
            errors.append(f"geometry.interior_search_start must be in (0, 1], got {geometry.interior_search_start}")
        if not 0 <= geometry.endpoint_precision <= 12:
            errors.append(f"geometry.endpoint_precision must be between 0 and 12, got {geometry.endpoint_precision}")

    if config.province_level == config.commune_level:
        errors.append("province_level and commune_level must differ")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(error_msg)
