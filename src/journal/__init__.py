"""JSONL journal of session events."""
