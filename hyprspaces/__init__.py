"""Hyprspaces - workspace indicator backend for Hyprland status bars.

Tracks the windows of every workspace, pairs special workspaces with the
regular workspace they are named after and publishes a display model per
workspace. Clicks received on the control socket are translated into
Hyprland dispatch commands. The daemon runs as an asyncio service.
"""
