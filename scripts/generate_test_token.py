#!/usr/bin/env python3
"""Generate test JWT tokens for API testing."""
import sys
import uuid
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from mindwork.core.auth import Role, create_access_token  # noqa: E402
from mindwork.core.config import get_settings  # noqa: E402

settings = get_settings()

# Subjects must be user ids to reach endpoints that resolve the caller
collaborator_id = sys.argv[1] if len(sys.argv) > 1 else str(uuid.uuid4())
manager_id = sys.argv[2] if len(sys.argv) > 2 else str(uuid.uuid4())

collaborator_token = create_access_token(
    collaborator_id,
    role=Role.COLLABORATOR,
    settings=settings,
    email="collaborator@example.com",
    full_name="Test Collaborator",
)
print(f"Collaborator Token ({collaborator_id}):\n{collaborator_token}\n")

manager_token = create_access_token(
    manager_id,
    role=Role.MANAGER,
    settings=settings,
    email="manager@example.com",
    full_name="Test Manager",
)
print(f"Manager Token ({manager_id}):\n{manager_token}")
