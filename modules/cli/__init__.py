"""
CLI Client Module.

Interactive menu client for the inventory management API.

Architecture:
- CLI is a thin presentation layer
- All business logic lives in the inventory service
- CLI calls the service via HTTP (httpx)
- Session token held in memory only, never persisted

Usage:
    python cli.py --help
    python cli.py
    python cli.py --output json
"""
