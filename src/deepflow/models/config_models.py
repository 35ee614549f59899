"""Configuration models for the focus timer.

Durations are stored in minutes, the way they are entered by the user, and
converted to seconds by the timer engine.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TimerSettings(BaseModel):
    """Timer durations and cycling behaviour."""

    model_config = ConfigDict(validate_assignment=True)

    work_duration: int = Field(default=25, gt=0, description="Work session minutes")
    short_break_duration: int = Field(default=5, gt=0, description="Short break minutes")
    long_break_duration: int = Field(default=15, gt=0, description="Long break minutes")
    long_break_interval: int = Field(
        default=4, gt=0, description="Work sessions before a long break"
    )
    auto_start_next_session: bool = Field(default=False)
    auto_start_delay: float = Field(
        default=2.0, ge=0, description="Seconds to wait before auto-starting"
    )


class NotificationSettings(BaseModel):
    """Which notification channels fire when a session completes."""

    model_config = ConfigDict(validate_assignment=True)

    in_app: bool = Field(default=True, description="Print a notice in the terminal")
    system: bool = Field(default=True, description="Send a desktop notification")


class AppConfig(BaseModel):
    """Main DeepFlow configuration."""

    model_config = ConfigDict(validate_assignment=True)

    timer: TimerSettings = Field(default_factory=TimerSettings)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)
