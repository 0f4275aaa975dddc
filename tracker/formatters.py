"""JSON payload formatting for fix uploads."""

from typing import Any

from positioning.nmea import Fix

__all__ = ["format_upload_payload"]

_COORDINATE_DECIMALS = 5


def format_upload_payload(device_name: str, fix: Fix, timestamp: int) -> dict[str, Any]:
    """Build the JSON object posted to the collector for one fix."""
    return {
        "deviceName": device_name,
        "timestamp": int(timestamp),
        "latitude": round(fix.latitude, _COORDINATE_DECIMALS),
        "longitude": round(fix.longitude, _COORDINATE_DECIMALS),
        "altitude": fix.altitude,
        "velocity": fix.speed,
        "quality": fix.quality,
        "direction": fix.course,
    }
