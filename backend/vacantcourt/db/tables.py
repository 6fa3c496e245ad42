"""
Single source of truth for database tables that exist after migrations.

Use these names when writing raw SQL (e.g. TRUNCATE in test resets).
"""
ALL_TABLE_NAMES = (
    "facilities",
    "sub_courts",
    "notification_requests",
    "user_accounts",
)
