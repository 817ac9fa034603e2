from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# project-root /data
DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ORGROLLUP_", env_file=".env", extra="ignore")

    data_dir: Path = DEFAULT_DATA_DIR
    units_file: str = "org_structure.json"
    records_file: str = "assessments.json"
    sections_file: str = "sections.json"

    # Column on assessment rows naming the organizational unit
    unit_field: str = "Organization"
    default_max_depth: int = Field(default=2, ge=0)
    log_level: str = "INFO"

    @property
    def units_path(self) -> Path:
        return self.data_dir / self.units_file

    @property
    def records_path(self) -> Path:
        return self.data_dir / self.records_file

    @property
    def sections_path(self) -> Path:
        return self.data_dir / self.sections_file


@lru_cache
def get_settings() -> Settings:
    return Settings()
