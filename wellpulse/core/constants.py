"""Application constants.

Fixed vocabularies, status names and wire prefixes shared across services.
"""

# Domain verification
# TXT records live at <VERIFY_HOST_PREFIX>.<domain>
VERIFY_HOST_PREFIX = "_gp-verify"
CHALLENGE_TOKEN_PREFIX = "gp-verify="
DEFAULT_TXT_TTL = 3600

VERIFICATION_PENDING = "pending"
VERIFICATION_VERIFIED = "verified"
VERIFICATION_FAILED = "failed"
VERIFICATION_STATUSES = (VERIFICATION_PENDING, VERIFICATION_VERIFIED, VERIFICATION_FAILED)

# Licensing
# Keys look like csw-lic-ABCD-1234-EFGH-5678
LICENSE_KEY_PREFIX = "csw-lic"
LICENSE_KEY_GROUPS = 4
LICENSE_KEY_GROUP_LENGTH = 4

LICENSE_ACTIVE = "active"
LICENSE_REVOKED = "revoked"

# Company users
USER_ROLES = ("employee", "admin")

# Severity levels
RED = "red"
AMBER = "amber"
GREEN = "green"

# Theme vocabulary, in tie-break order
THEME_VOCABULARY = (
    "fatigue",
    "workload",
    "support",
    "stress",
    "communication",
    "sleep",
    "manager",
    "safety",
    "burnout",
    "team",
)

# Support requests
SUPPORT_TYPES = ("hr", "eap", "crisis", "other")
SUPPORT_STATUSES = ("new", "in_progress", "resolved")

# Weekly dispatch outcomes
DISPATCH_SENT = "sent"
DISPATCH_SKIPPED = "skipped"
DISPATCH_FAILED = "failed"
REASON_ALREADY_SENT = "already_sent"
REASON_NO_RECIPIENTS = "no_recipients"

# Pagination
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
MAX_LIST_LIMIT = 500

# JWT Token Configuration
# Token expiration time in minutes (8 hours)
ACCESS_TOKEN_EXPIRE_MINUTES = 480
