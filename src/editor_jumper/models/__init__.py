"""Data models for Editor Jumper."""
