from pathlib import Path
from typing import List, Set
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def parse_extensions(value: str) -> List[str]:
    """Split a comma separated extension list and lower-case it."""
    return [ext.lower() for ext in _split_csv(value)]


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="REPOGRAPH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # File Classification
    database_extensions: str = Field(default=".db,.sqlite,.sqlite3,.db3,.duckdb,.ddb,.mdb,.accdb")
    markdown_extensions: str = Field(default=".md,.mdx,.markdown")
    source_extensions: str = Field(default=".ts,.tsx,.js,.jsx")
    ignored_dirs: str = Field(
        default=".git,.hg,.svn,.venv,venv,env,__pycache__,node_modules,.idea,.vscode,"
                ".pytest_cache,.mypy_cache,build,dist,out,coverage"
    )

    # Scan Configuration
    max_file_size_mb: float = Field(default=10.0, gt=0)
    max_workers: int = Field(default=4, ge=1)
    build_timeout: float = Field(default=300.0, gt=0)

    # Graph Content
    include_imports: bool = Field(default=True)
    include_declarations: bool = Field(default=True)
    include_urls: bool = Field(default=True)

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_file: str = Field(default="logs/repograph.log")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def database_extensions_list(self) -> List[str]:
        """Get database extensions as a lower-cased list."""
        return parse_extensions(self.database_extensions)

    @property
    def markdown_extensions_list(self) -> List[str]:
        """Get markdown extensions as a lower-cased list."""
        return parse_extensions(self.markdown_extensions)

    @property
    def source_extensions_list(self) -> List[str]:
        """Get source extensions as a lower-cased list."""
        return parse_extensions(self.source_extensions)

    @property
    def ignored_dirs_set(self) -> Set[str]:
        return set(_split_csv(self.ignored_dirs))

    @property
    def max_file_size_bytes(self) -> int:
        return int(self.max_file_size_mb * 1024 * 1024)

    @property
    def log_dir(self) -> Path:
        """Get log directory path."""
        return Path(self.log_file).parent

    def ensure_directories(self):
        """Ensure necessary directories exist."""
        if self.log_file:
            self.log_dir.mkdir(parents=True, exist_ok=True)


settings = Settings()
settings.ensure_directories()
