"""
Configuration management for Shadow Bets.
Supports config.json with environment variable overrides.
All paths are resolved relative to the project root.
"""

import json
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

# Project root directory (parent of the 'shadowbets' folder)
PROJECT_ROOT = Path(__file__).parent.parent


def get_env(key: str, default: str = None) -> Optional[str]:
    """Get environment variable with optional default."""
    return os.environ.get(key, default)


def get_env_bool(key: str, default: bool = False) -> bool:
    """Get boolean environment variable."""
    val = os.environ.get(key)
    if val is None:
        return default
    return val.lower() in ("true", "1", "yes", "on")


def get_env_int(key: str, default: int = 0) -> int:
    """Get integer environment variable."""
    val = os.environ.get(key)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        return default


def get_env_float(key: str, default: float = 0.0) -> float:
    """Get float environment variable."""
    val = os.environ.get(key)
    if val is None:
        return default
    try:
        return float(val)
    except ValueError:
        return default


# ==================== Configuration Models ====================

class ServerConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = True
    name: str = "Shadow Bets"


class WalletConfig(BaseModel):
    starting_balance: float = Field(default=1000.0, ge=0)
    history_limit: int = Field(default=50, gt=0)


class GameConfig(BaseModel):
    enabled: bool = True
    stake_amount: float = Field(default=25.0, gt=0)
    # Uniform across every guess, whatever the guess labels advertise
    payout_multiplier: float = Field(default=10.0, gt=0)
    # None keeps the variant's own presentation delay
    resolution_delay: Optional[float] = Field(default=None, ge=0)


class GamesConfig(BaseModel):
    dice: GameConfig = Field(default_factory=GameConfig)
    roulette: GameConfig = Field(default_factory=GameConfig)
    cards: GameConfig = Field(default_factory=GameConfig)
    coins: GameConfig = Field(default_factory=GameConfig)
    race: GameConfig = Field(default_factory=GameConfig)


class OpponentConfig(BaseModel):
    """The cosmetic bot that 'bets' alongside the player."""
    names: List[str] = Field(
        default_factory=lambda: ["Alex_777", "CryptoCat", "NeonGhost"], min_length=1
    )
    typing_delay: float = Field(default=1.8, ge=0)


class StorageConfig(BaseModel):
    backend: str = "sqlite"  # "sqlite" or "memory"
    key: str = "ShadowBetsAppState"


class LoggingConfig(BaseModel):
    level: str = "INFO"
    log_to_file: bool = False
    formatter: str = "color"


class PathsConfig(BaseModel):
    """All paths are relative to PROJECT_ROOT."""
    config_file: str = "config.json"
    database: str = "data/shadowbets.db"
    log_file: str = "data/app.log"

    def get_config_path(self) -> Path:
        return PROJECT_ROOT / self.config_file

    def get_db_path(self) -> Path:
        return PROJECT_ROOT / self.database

    def get_log_path(self) -> Path:
        return PROJECT_ROOT / self.log_file


class AppConfig(BaseModel):
    """Main application configuration."""
    server: ServerConfig = Field(default_factory=ServerConfig)
    wallet: WalletConfig = Field(default_factory=WalletConfig)
    games: GamesConfig = Field(default_factory=GamesConfig)
    opponent: OpponentConfig = Field(default_factory=OpponentConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)


# ==================== Configuration Loading ====================

def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """
    Load configuration from config.json with environment variable overrides.
    Environment variables take precedence over config.json values.
    """
    if config_path is None:
        config_path = PROJECT_ROOT / "config.json"

    data = {}
    if config_path.exists():
        with open(config_path, "r") as f:
            data = json.load(f)

    if get_env("SERVER_HOST"):
        data.setdefault("server", {})["host"] = get_env("SERVER_HOST")
    if get_env("SERVER_PORT"):
        data.setdefault("server", {})["port"] = get_env_int("SERVER_PORT", 8000)
    if get_env("DEBUG"):
        data.setdefault("server", {})["debug"] = get_env_bool("DEBUG")

    if get_env("STARTING_BALANCE"):
        data.setdefault("wallet", {})["starting_balance"] = get_env_float(
            "STARTING_BALANCE", 1000.0
        )

    if get_env("DB_PATH"):
        data.setdefault("paths", {})["database"] = get_env("DB_PATH")
    if get_env("STORAGE_BACKEND"):
        data.setdefault("storage", {})["backend"] = get_env("STORAGE_BACKEND")

    if get_env("LOG_LEVEL"):
        data.setdefault("logging", {})["level"] = get_env("LOG_LEVEL")
    if get_env("LOG_TO_FILE"):
        data.setdefault("logging", {})["log_to_file"] = get_env_bool("LOG_TO_FILE")
    if get_env("LOG_FORMATTER"):
        data.setdefault("logging", {})["formatter"] = get_env("LOG_FORMATTER")

    return AppConfig(**data)


# Global config instance
settings = load_config()
