"""
Schemas shared by the request, message and conversation APIs.
"""

from pydantic import BaseModel, ConfigDict, Field


class Participant(BaseModel):
    """
    Identity snapshot of one side of a request, conversation or message.

    Snapshots are copied onto the stored record so list views never have to
    look the user up again.
    """
    id: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(default="", max_length=100)
    role: str = Field(default="user", max_length=30)

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "id": "mentor-42",
                    "name": "Asha Rao",
                    "email": "asha@example.com",
                    "role": "mentor"
                }
            ]
        }
    )


class MessageResult(BaseModel):
    """Plain acknowledgement body, e.g. {"message": "User blocked successfully"}."""
    message: str
