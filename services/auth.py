import logging

from pydantic import ValidationError

import config
from airtable import AirtableClient
from enums.employee_status import EmployeeStatus
from exceptions import (
    CustomerNotFoundException,
    EmailAlreadyRegisteredException,
    EmployeeNotFoundException,
    InvalidCredentialsException,
    RemoteCallException,
    ReservedLoginException,
)
from models.user import UserDTO
from repositories.customer import CustomerRepository
from repositories.employee import EmployeeRepository
from utils.local_store import LocalStore, LocalStoreKeys

logger = logging.getLogger(__name__)


class AuthService:
    """
    Login state of this device.

    Customers log in with email and password. Employees share one login
    (config.EMPLOYEE_LOGIN_TOKEN) and are identified by their password alone.
    Passwords are compared in plaintext against the base.
    """

    def __init__(self, client: AirtableClient, store: LocalStore):
        self.client = client
        self.store = store
        self.user: UserDTO | None = None

    @staticmethod
    def is_employee_login(login: str) -> bool:
        return login.strip().lower() == config.EMPLOYEE_LOGIN_TOKEN.lower()

    def restore(self) -> UserDTO | None:
        """Load the session remembered by a previous run."""
        stored = self.store.get(LocalStoreKeys.AUTH_USER)
        if not stored:
            return None
        try:
            self.user = UserDTO.model_validate(stored)
        except ValidationError as e:
            logger.warning(f"[Auth] Discarding unreadable stored session: {e}")
            self.store.delete(LocalStoreKeys.AUTH_USER)
            return None
        logger.info(f"[Auth] Restored session of {self.user.role.value} {self.user.id}")
        return self.user

    def _authenticated(self, user: UserDTO) -> UserDTO:
        self.user = user
        self.store.set(LocalStoreKeys.AUTH_USER, user.model_dump(mode="json"))
        logger.info(f"[Auth] Logged in {user.role.value} {user.id}")
        return user

    async def login(self, login: str, password: str) -> UserDTO:
        if self.is_employee_login(login):
            employee = await EmployeeRepository.get_by_password(password, self.client)
            if employee is None:
                raise EmployeeNotFoundException()
            return self._authenticated(employee)

        customer = await CustomerRepository.get_by_email(login, self.client)
        if customer is None:
            raise CustomerNotFoundException(login)
        if customer.password != password:
            raise InvalidCredentialsException(login)
        return self._authenticated(customer)

    async def register(self, name: str, email: str, phone: str, password: str) -> UserDTO:
        if self.is_employee_login(email):
            raise ReservedLoginException(email)
        if await CustomerRepository.get_by_email(email, self.client) is not None:
            raise EmailAlreadyRegisteredException(email)
        customer = await CustomerRepository.create(name, email, phone, password, self.client)
        return self._authenticated(customer)

    async def logout(self) -> None:
        """Forget the session; an employee is taken off the line first (best effort)."""
        user = self.user
        if user is not None and user.is_employee:
            try:
                await EmployeeRepository.update_status(user.id, EmployeeStatus.OFFLINE, self.client)
            except RemoteCallException as e:
                logger.error(f"[Auth] Failed to set employee {user.id} offline on logout: {e}")

        self.user = None
        self.store.delete(
            LocalStoreKeys.AUTH_USER,
            LocalStoreKeys.ACTIVE_ORDER_SNAPSHOT,
            LocalStoreKeys.THANK_YOU_ORDER,
        )
        if user is not None:
            logger.info(f"[Auth] Logged out {user.role.value} {user.id}")
