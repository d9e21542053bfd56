from __future__ import annotations

CREATE_FLAGS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS flags (
  name TEXT PRIMARY KEY,
  value BOOLEAN NOT NULL,
  updated_ms BIGINT
);
"""

SELECT_FLAG_SQL = """
SELECT value FROM flags WHERE name = ?
"""

UPSERT_FLAG_SQL = """
INSERT INTO flags (name, value, updated_ms)
VALUES (?, ?, ?)
ON CONFLICT (name) DO UPDATE SET value = excluded.value, updated_ms = excluded.updated_ms
"""
