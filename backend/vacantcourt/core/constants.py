"""
Centralized constants for the scheduler, sub-court statuses and notification links.

Change job IDs or statuses here instead of scattering literals across main, routes and services.
"""

# Scheduler job IDs (must match ids used in main.py add_job)
COURT_NOTIFY_JOB_ID = "court_notify"

# Sub-court live status values (written by the court sensors, read-only here)
STATUS_AVAILABLE = "available"
STATUS_IN_USE = "in-use"
STATUS_MAINTENANCE = "maintenance"

# Facility detail page on the public site; notification emails deep-link here
COURT_PATH_TEMPLATE = "/court/{court_id}"

# Job result status codes (HTTP-style, reported by the scheduled entry point)
JOB_STATUS_OK = 200
JOB_STATUS_FAILED = 500

# Outbound email: cap per-request HTTP time so one slow send cannot eat the sweep budget
EMAIL_SEND_TIMEOUT_SECONDS = 10.0
