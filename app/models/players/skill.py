"""Skill tracking model - skill values supplied by the skill calculator."""

SKILL_TRACKING_DDL = """
CREATE TABLE IF NOT EXISTS skill_tracking (
    username VARCHAR NOT NULL,
    skill_type VARCHAR NOT NULL,
    skill_value DOUBLE NOT NULL,
    calculated_at TIMESTAMP NOT NULL
)
"""

SKILL_TRACKING_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_skill_username ON skill_tracking(username)",
]

SKILL_TYPES = ["aim", "speed", "accuracy", "reading", "consistency"]
