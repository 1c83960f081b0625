"""Data models shared by agents and the orchestrator."""
