"""Helper functions for G4S Alarm integration."""
from typing import Dict, Any
from homeassistant.config_entries import ConfigEntry
from .const import DOMAIN, MANUFACTURER, MODEL


def get_device_info(entry: ConfigEntry) -> Dict[str, Any]:
    """Get standardized device info for G4S Alarm entities."""
    return {
        "identifiers": {(DOMAIN, entry.entry_id)},
        "name": entry.title or "G4S Alarm",
        "manufacturer": MANUFACTURER,
        "model": MODEL,
    }
