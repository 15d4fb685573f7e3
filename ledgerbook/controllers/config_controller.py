"""
Config Controller
Handles configuration API endpoints
"""

from fastapi import APIRouter, HTTPException

from ..config import config, save_config
from ..utils.logger import logger

router = APIRouter()

# Sections that can be changed at runtime; store and api need a restart
EDITABLE_SECTIONS = ("posting", "tax", "audit")


@router.get("")
async def get_config():
    """Get current configuration"""
    return config.model_dump()


@router.put("")
async def update_config(new_config: dict):
    """Update configuration"""
    try:
        for section_name in EDITABLE_SECTIONS:
            if section_name not in new_config:
                continue
            section = getattr(config, section_name)
            for key, value in new_config[section_name].items():
                if hasattr(section, key):
                    setattr(section, key, value)
        
        # Save to file
        save_config(config)
        
        logger.info("Configuration updated")
        return {"status": "success", "message": "Configuration updated"}
    except Exception as e:
        logger.error(f"Failed to update config: {e}")
        raise HTTPException(status_code=500, detail=str(e))
