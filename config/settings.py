#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Settings - Centralized configuration management
"""

from pathlib import Path
from typing import List, Optional
from pydantic_settings import BaseSettings

from .constants import (
    API_RATE_LIMIT,
    BROWSER_ARGS,
    LOG_BACKUP_COUNT,
    LOG_FILE,
    LOG_LEVEL,
    LOG_MAX_SIZE_MB,
    MAX_REQUEST_BYTES,
    PAGE_LOAD_TIMEOUT_MS,
    RENDERER_TIMEOUT_SECONDS,
    VIEWPORT_HEIGHT,
    VIEWPORT_WIDTH,
)


# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings"""

    # ========== Server ==========
    host: str = "127.0.0.1"
    port: int = 3000
    log_level: str = LOG_LEVEL
    rate_limit: str = API_RATE_LIMIT
    max_request_bytes: int = MAX_REQUEST_BYTES
    cors_origins: List[str] = ["*"]

    # ========== Logging ==========
    log_file: Path = BASE_DIR / LOG_FILE
    log_max_size_mb: int = LOG_MAX_SIZE_MB
    log_backup_count: int = LOG_BACKUP_COUNT

    # ========== Directories ==========
    public_dir: Path = BASE_DIR / "public"
    image_dir: Path = BASE_DIR / "public" / "images"
    image_url_prefix: str = "/images"

    # ========== Math Renderer ==========
    math_renderer: str = "katex"  # katex | mathml
    node_binary: str = "node"
    katex_module_dir: Path = BASE_DIR / "node_modules" / "katex"
    katex_css_path: Optional[Path] = None  # defaults to <katex_module_dir>/dist/katex.min.css
    renderer_timeout_seconds: float = RENDERER_TIMEOUT_SECONDS
    katex_trust: bool = False  # \href / \includegraphics would make the browser fetch URLs

    # ========== Rasterizer ==========
    browser_args: List[str] = list(BROWSER_ARGS)
    viewport_width: int = VIEWPORT_WIDTH
    viewport_height: int = VIEWPORT_HEIGHT
    page_load_timeout_ms: int = PAGE_LOAD_TIMEOUT_MS

    # ========== Output ==========
    # Text is always escaped by the assembler; the sanitizer is a second pass.
    sanitize_output: bool = True
    style_profile: str = "default"  # default | document

    class Config:
        env_file = str(BASE_DIR / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # Allow extra fields from .env that aren't defined in model

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Create directories
        for dir_path in [self.public_dir, self.image_dir]:
            dir_path.mkdir(exist_ok=True, parents=True)

    def get_katex_css_path(self) -> Path:
        """Path of the KaTeX stylesheet injected into every formula page"""
        if self.katex_css_path:
            return Path(self.katex_css_path)
        return Path(self.katex_module_dir) / "dist" / "katex.min.css"


# Global settings instance
settings = Settings()
