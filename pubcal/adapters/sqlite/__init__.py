"""SQLite schema management."""
