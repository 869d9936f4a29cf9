"""Tool configuration loading and schemas."""
