"""Admin control panel."""
