"""
Print an admin token and a user token for trying the API by hand.

Both tokens are valid for 24 hours and are signed with JWT_SECRET (loaded
from the environment or the .env file at project root).

Usage:
    python scripts/generate_tokens.py
"""

import sys
from pathlib import Path

# Allow running as a plain script from the project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from api.auth import create_access_token  # noqa: E402
from api.config import AuthConfig  # noqa: E402

BASE_URL = "http://localhost:8000"


def main() -> int:
    if not AuthConfig.get_jwt_secret():
        print("JWT_SECRET is not set. Add it to .env or the environment first.", file=sys.stderr)
        return 1

    admin_token = create_access_token("admin-1", role="admin")
    user_token = create_access_token("user-123", role="user")

    print("\n=== Catalog Query Service Test Tokens ===\n")
    print("Admin Token (valid for 24 hours):")
    print(admin_token)
    print("\nUser Token (valid for 24 hours):")
    print(user_token)
    print("\n=== Usage Examples ===\n")
    print("# Create product (admin only):")
    print(f'curl -X POST "{BASE_URL}/api/products" \\')
    print(f'  -H "Authorization: Bearer {admin_token}" \\')
    print('  -H "Content-Type: application/json" \\')
    print("""  -d '{"name":"Test Product","price":99.99,"category":"Electronics"}'\n""")
    print("# Get cart (user):")
    print(f'curl "{BASE_URL}/api/cart" \\')
    print(f'  -H "Authorization: Bearer {user_token}"\n')
    return 0


if __name__ == "__main__":
    sys.exit(main())
