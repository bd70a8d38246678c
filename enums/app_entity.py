from enum import Enum


class AppEntity(Enum):
    CUSTOMER = 1
    EMPLOYEE = 2
    COMMON = 3
