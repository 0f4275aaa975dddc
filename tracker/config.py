"""Tracker configuration."""

import dataclasses

from positioning.geodesy import DEFAULT_THRESHOLD_METERS


@dataclasses.dataclass(frozen=True)
class TrackerConfig:
    """Settings resolved before the tracker components are built.

    Parameters
    ----------
    port : str
        Serial device path or descriptive port name of the GPS receiver.
    device_name : str
        Name reported to the collector with every upload.
    upload_url : str
        Collector endpoint receiving the JSON POST.
    interval_seconds : float
        Period of the upload loop. Defaults to 60 seconds.
    baudrate : int
        Serial line speed. Defaults to 4800, the NMEA 0183 rate.
    read_timeout_seconds : float
        Serial read timeout; bounds how long shutdown waits for the reader.
    threshold_meters : float
        Minimum movement for a fix to count as a change. Defaults to 33 m.
    upload_timeout_seconds : float
        HTTP request timeout for uploads.
    """

    port: str
    device_name: str
    upload_url: str
    interval_seconds: float = 60.0
    baudrate: int = 4800
    read_timeout_seconds: float = 2.0
    threshold_meters: float = DEFAULT_THRESHOLD_METERS
    upload_timeout_seconds: float = 10.0

    def validate(self) -> "TrackerConfig":
        """Raise ``ValueError`` for unusable settings; return self otherwise."""
        if not self.device_name:
            raise ValueError("device_name must not be empty")
        if not self.upload_url:
            raise ValueError("upload_url must not be empty")
        for name in (
            "interval_seconds",
            "read_timeout_seconds",
            "threshold_meters",
            "upload_timeout_seconds",
        ):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
        if self.baudrate <= 0:
            raise ValueError(f"baudrate must be positive, got {self.baudrate}")
        return self
