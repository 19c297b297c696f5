"""Print a development bearer token for a learner.

Usage: python scripts/issue_token.py <learner_id> [learner|admin]
"""
import sys
from datetime import timedelta

from fluentpath.kernel.identity import ROLE_ADMIN, ROLE_LEARNER, create_access_token

if len(sys.argv) < 2:
    print(__doc__)
    sys.exit(1)

learner_id = sys.argv[1]
role = sys.argv[2] if len(sys.argv) > 2 else ROLE_LEARNER
if role not in (ROLE_LEARNER, ROLE_ADMIN):
    print(f"Unknown role: {role}")
    sys.exit(1)

token, expires = create_access_token(learner_id, role=role, expires_delta=timedelta(days=7))
print(f"Learner: {learner_id} ({role})")
print(f"Expires: {expires.isoformat()}")
print(f"\nAuthorization: Bearer {token}")
