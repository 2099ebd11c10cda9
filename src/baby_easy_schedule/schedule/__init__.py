"""EASY schedule generation and timeline helpers."""
