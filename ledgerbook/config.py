"""
Configuration Management Module
Loads and manages application configuration from config.yaml
"""

from pathlib import Path
from typing import Dict, List, Optional
import yaml
from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvSettings(BaseSettings):
    """Environment overrides (LEDGERBOOK_CONFIG_PATH)"""
    model_config = SettingsConfigDict(env_prefix="LEDGERBOOK_")

    config_path: str = "config.yaml"


class StoreConfig(BaseModel):
    """Document store configuration"""
    backend: str = "sqlite"
    path: str = "./ledgerbook.db"


class PostingConfig(BaseModel):
    """Voucher posting configuration"""
    enforce_balanced: bool = False
    balance_tolerance: float = 0.005


class TaxConfig(BaseModel):
    """Tax classification rule table"""
    tax_tokens: List[str] = ["gst", "tax", "duty", "cess", "vat"]
    # Checked in order, first match wins
    component_tokens: List[Dict[str, str]] = [
        {"token": "cess", "component": "cess"},
        {"token": "integrated", "component": "igst"},
        {"token": "igst", "component": "igst"},
        {"token": "central", "component": "cgst"},
        {"token": "cgst", "component": "cgst"},
        {"token": "state", "component": "sgst"},
        {"token": "sgst", "component": "sgst"},
        {"token": "utgst", "component": "sgst"},
    ]
    default_component: str = "cgst"
    taxable_groups: List[str] = ["Sales Accounts", "Purchase Accounts"]
    party_groups: List[str] = ["Sundry Debtors", "Sundry Creditors"]
    b2cl_threshold: float = 250000.0
    home_state: str = ""
    home_country: str = "India"


class ApiConfig(BaseModel):
    """API configuration"""
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: List[str] = ["http://localhost:3000"]


class LoggingConfig(BaseModel):
    """Logging configuration"""
    level: str = "INFO"
    file: str = "./logs/ledgerbook.log"
    max_size: int = 10
    backup_count: int = 5
    console: bool = True
    colorize: bool = True


class AuditConfig(BaseModel):
    """Audit trail configuration"""
    enabled: bool = True
    max_entries: int = 1000
    user: str = "System"


class AppConfig(BaseModel):
    """Main application configuration"""
    store: StoreConfig = StoreConfig()
    posting: PostingConfig = PostingConfig()
    tax: TaxConfig = TaxConfig()
    api: ApiConfig = ApiConfig()
    logging: LoggingConfig = LoggingConfig()
    audit: AuditConfig = AuditConfig()


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Load configuration from YAML file"""
    config_file = Path(config_path or EnvSettings().config_path)
    
    if config_file.exists():
        with open(config_file, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}
            return AppConfig(**config_data)
    
    return AppConfig()


def save_config(config: AppConfig, config_path: Optional[str] = None) -> None:
    """Save configuration to YAML file"""
    config_file = Path(config_path or EnvSettings().config_path)
    
    with open(config_file, "w", encoding="utf-8") as f:
        yaml.dump(config.model_dump(), f, default_flow_style=False, allow_unicode=True)


# Global configuration instance
config = load_config()
