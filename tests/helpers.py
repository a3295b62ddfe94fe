"""Sample participants and small test doubles shared by the test modules."""

from datetime import timedelta
from typing import Dict, Optional

from contacthub.core.security import create_access_token
from contacthub.schemas.common import Participant

MENTOR = Participant(id="mentor-1", name="Asha Rao", email="asha@example.com", role="mentor")
STUDENT = Participant(id="student-1", name="Kiran Das", email="kiran@example.com", role="student")
INVESTOR = Participant(id="investor-1", name="Dev Mehta", email="dev@example.com", role="investor")
ADMIN = Participant(id="admin-1", name="Ops", email="ops@example.com", role="admin")


def auth_headers(user: Participant, expires_delta: Optional[timedelta] = None) -> Dict[str, str]:
    token = create_access_token(
        {"user_id": user.id, "name": user.name, "email": user.email, "role": user.role},
        expires_delta=expires_delta,
    )
    return {"Authorization": f"Bearer {token}"}


class RecordingPublisher:
    """Collects realtime pushes instead of writing to sockets."""

    def __init__(self):
        self.sent = []

    async def __call__(self, user_id, payload):
        self.sent.append((user_id, payload))
