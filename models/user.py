from pydantic import BaseModel, Field

from enums.employee_status import EmployeeStatus
from enums.user_role import UserRole


class UserDTO(BaseModel):
    id: str
    name: str = ""
    email: str = ""
    phone: str = ""
    role: UserRole = UserRole.CUSTOMER
    status: EmployeeStatus | None = None
    # Only populated on lookups for credential checks, never persisted locally
    password: str | None = Field(default=None, exclude=True, repr=False)

    @property
    def is_employee(self) -> bool:
        return self.role == UserRole.EMPLOYEE
