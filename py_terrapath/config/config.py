from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings pulled from TERRAPATH_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TERRAPATH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["json", "plain"] = Field(default="json", description="Logging format")

    # Terrain Generation Configuration
    default_grid_width: int = Field(default=200, ge=1, description="Default grid width in cells")
    default_grid_height: int = Field(default=150, ge=1, description="Default grid height in cells")
    max_grid_size: int = Field(default=1024, ge=1, description="Max cells along either axis")
    default_zoom: float = Field(default=120.0, gt=0, description="Grid cells per noise unit")
    default_octaves: int = Field(default=8, ge=1, description="Noise octaves")
    default_falloff: float = Field(default=0.5, gt=0, le=1, description="Amplitude falloff per octave")
    default_height_scale: float = Field(default=1000.0, ge=0, description="Sample to elevation multiplier")

    # Search Configuration
    snow_traversable: bool = Field(default=False, description="Whether searches may cross snow")
    default_connectivity: Literal[4, 8] = Field(default=8, description="Grid adjacency")
    default_teleport_cost: float = Field(default=1.0, gt=0, description="Cost of a portal jump")
    default_heuristic_scaling: float = Field(
        default=1.0, gt=0, description="Portal-detour heuristic bias; > 1 may lose optimality"
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
