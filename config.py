"""Configuration management using Pydantic settings"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Layout engine settings"""

    # Logging
    LOG_LEVEL: str = "INFO"
    # Dump the full layout (layers, tracks, ranges, instructions) after each pass
    DEBUG_DUMP: bool = False

    # Time resolution: all timeline instants are rounded to 1/TIMESCALE seconds
    TIMESCALE: int = 600

    # Transitions
    DEFAULT_TRANSITION_DURATION: float = 1.5

    # Length of the neutral source used to fill the blank video track.
    # Spans longer than this are covered by time-scaling the source.
    BLANK_SOURCE_DURATION: float = 30.0

    class Config:
        env_file = ".env"
        case_sensitive = True

    def get_time_info(self) -> dict:
        """Get timing configuration for debug output"""
        return {
            "timescale": self.TIMESCALE,
            "resolution_seconds": 1.0 / self.TIMESCALE,
            "default_transition_duration": self.DEFAULT_TRANSITION_DURATION,
            "blank_source_duration": self.BLANK_SOURCE_DURATION,
        }


# Global settings instance
settings = Settings()
