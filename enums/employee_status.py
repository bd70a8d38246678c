from enum import Enum


class EmployeeStatus(str, Enum):
    """Availability flag stored on the employee record."""
    ONLINE = "на линии"
    OFFLINE = "не работает"
