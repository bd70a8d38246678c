from enum import Enum


class EmployeeAppStatus(str, Enum):
    """Local state of the courier workflow."""
    OFFLINE = "offline"
    ONLINE = "online"
    DELIVERING = "delivering"
