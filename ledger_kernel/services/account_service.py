"""
AccountService -- write side of the Account Directory.

Responsibility:
    Creates, renames, retypes and deletes chart of accounts rows, and
    records each change in the activity log.

Architecture position:
    Kernel > Services -- imperative shell.  Reads go through
    AccountSelector; this service only mutates.

Invariants enforced:
    - Account codes are unique.
    - An account referenced by journal lines cannot be deleted, and its
      type cannot change, since either would rewrite the meaning of posted
      history (the trial balance nets by type).

Failure modes:
    - DuplicateAccountCodeError on a code already in use.
    - AccountNotFoundError on an unknown account id.
    - AccountReferencedError on delete/retype of a referenced account.
    - ValueError on an empty code or name, or an unknown type.
"""

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ledger_kernel.domain.clock import Clock
from ledger_kernel.domain.dtos import AccountInfo, AccountType
from ledger_kernel.exceptions import (
    AccountNotFoundError,
    AccountReferencedError,
    DuplicateAccountCodeError,
)
from ledger_kernel.logging_config import get_logger
from ledger_kernel.models.account import Account
from ledger_kernel.models.journal import JournalLine
from ledger_kernel.services.activity_log_service import ActivityLogService
from ledger_kernel.services.base import BaseService

logger = get_logger("services.account")

ENTITY_TYPE = "account"


class AccountService(BaseService[Account]):
    """
    Service for maintaining the chart of accounts.

    All public methods return AccountInfo DTOs, never ORM rows.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        activity_log: ActivityLogService | None = None,
    ):
        super().__init__(session)
        self._activity = activity_log or ActivityLogService(session, clock)

    def _get(self, account_id: int) -> Account:
        account = self.session.get(Account, account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    def _code_taken(self, code: str, exclude_id: int | None = None) -> bool:
        stmt = select(Account.id).where(Account.code == code)
        if exclude_id is not None:
            stmt = stmt.where(Account.id != exclude_id)
        return self.session.execute(stmt).first() is not None

    def _line_count(self, account_id: int) -> int:
        return self.session.execute(
            select(func.count(JournalLine.id)).where(
                JournalLine.account_id == account_id
            )
        ).scalar_one()

    def create_account(
        self,
        code: str,
        name: str,
        account_type: AccountType | str,
    ) -> AccountInfo:
        """
        Add an account to the chart of accounts.

        Raises:
            DuplicateAccountCodeError: code is already used by another account.
            ValueError: empty code or name, or unknown account type.
        """
        code = (code or "").strip()
        name = (name or "").strip()
        account_type = AccountType(account_type)
        if not code:
            raise ValueError("Account code is required")
        if not name:
            raise ValueError("Account name is required")

        if self._code_taken(code):
            logger.warning("account_code_duplicate", extra={"account_code": code})
            raise DuplicateAccountCodeError(code)

        account = Account(code=code, name=name, account_type=account_type.value)
        self.session.add(account)
        self.session.flush()

        info = AccountInfo.from_model(account)
        logger.info(
            "account_created",
            extra={
                "account_id": info.account_id,
                "account_code": info.code,
                "account_type": info.account_type.value,
            },
        )
        self._activity.log_activity(
            "create",
            ENTITY_TYPE,
            f"Created account {info.code} - {info.name}",
            entity_id=info.account_id,
            entity_name=info.name,
            details={"code": info.code, "account_type": info.account_type.value},
        )
        return info

    def update_account(
        self,
        account_id: int,
        *,
        code: str | None = None,
        name: str | None = None,
        account_type: AccountType | str | None = None,
    ) -> AccountInfo:
        """
        Change an account's code, name or type.  Omitted fields are kept.

        Raises:
            AccountNotFoundError: unknown account_id.
            DuplicateAccountCodeError: new code belongs to another account.
            AccountReferencedError: type change on an account with lines.
        """
        account = self._get(account_id)
        changes: dict[str, dict[str, str]] = {}

        if code is not None:
            code = code.strip()
            if not code:
                raise ValueError("Account code is required")
            if code != account.code:
                if self._code_taken(code, exclude_id=account_id):
                    raise DuplicateAccountCodeError(code)
                changes["code"] = {"from": account.code, "to": code}
                account.code = code

        if name is not None:
            name = name.strip()
            if not name:
                raise ValueError("Account name is required")
            if name != account.name:
                changes["name"] = {"from": account.name, "to": name}
                account.name = name

        if account_type is not None:
            new_type = AccountType(account_type)
            if new_type.value != account.account_type:
                if self._line_count(account_id) > 0:
                    logger.warning(
                        "account_retype_refused",
                        extra={"account_id": account_id},
                    )
                    raise AccountReferencedError(account_id, operation="change the type of")
                changes["account_type"] = {
                    "from": account.account_type,
                    "to": new_type.value,
                }
                account.account_type = new_type.value

        self.session.flush()
        info = AccountInfo.from_model(account)

        if changes:
            logger.info(
                "account_updated",
                extra={"account_id": account_id, "fields": sorted(changes)},
            )
            self._activity.log_activity(
                "update",
                ENTITY_TYPE,
                f"Updated account {info.code} - {info.name}",
                entity_id=account_id,
                entity_name=info.name,
                details=changes,
            )
        return info

    def delete_account(self, account_id: int) -> None:
        """
        Remove an account that no journal line references.

        Raises:
            AccountNotFoundError: unknown account_id.
            AccountReferencedError: the account has journal lines.
        """
        account = self._get(account_id)
        line_count = self._line_count(account_id)
        if line_count > 0:
            logger.warning(
                "account_delete_refused",
                extra={"account_id": account_id, "line_count": line_count},
            )
            raise AccountReferencedError(account_id)

        code, name = account.code, account.name
        self.session.delete(account)
        self.session.flush()

        logger.info("account_deleted", extra={"account_id": account_id, "account_code": code})
        self._activity.log_activity(
            "delete",
            ENTITY_TYPE,
            f"Deleted account {code} - {name}",
            entity_id=account_id,
            entity_name=name,
        )
