"""Domain types shared by the setup services."""

from .models import AccountRef, LaunchEntry, TargetApp, launch_entry_for

__all__ = ["AccountRef", "LaunchEntry", "TargetApp", "launch_entry_for"]
