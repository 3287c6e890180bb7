"""
Module: ledger_kernel.selectors.account_selector
Responsibility: Read side of the Account Directory -- lookups and the
    chart of accounts listing.
Architecture position: Kernel > Selectors.
"""

from sqlalchemy import select

from ledger_kernel.domain.dtos import AccountInfo, AccountType
from ledger_kernel.exceptions import AccountNotFoundError
from ledger_kernel.models.account import Account
from ledger_kernel.selectors.base import BaseSelector


class AccountSelector(BaseSelector[Account]):
    """Selector for chart of accounts queries."""

    def get(self, account_id: int) -> AccountInfo:
        """
        Raises:
            AccountNotFoundError: unknown account_id.
        """
        account = self.session.get(Account, account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return AccountInfo.from_model(account)

    def find(self, account_id: int) -> AccountInfo | None:
        account = self.session.get(Account, account_id)
        return AccountInfo.from_model(account) if account else None

    def by_code(self, code: str) -> AccountInfo | None:
        account = self.session.execute(
            select(Account).where(Account.code == code.strip())
        ).scalar_one_or_none()
        return AccountInfo.from_model(account) if account else None

    def list_accounts(
        self,
        account_type: AccountType | str | None = None,
    ) -> list[AccountInfo]:
        """All accounts ordered by code, optionally of one type."""
        stmt = select(Account)
        if account_type is not None:
            stmt = stmt.where(Account.account_type == AccountType(account_type).value)
        stmt = stmt.order_by(Account.code)
        return [
            AccountInfo.from_model(account)
            for account in self.session.execute(stmt).scalars().all()
        ]

    def exists(self, account_id: int) -> bool:
        return self.session.get(Account, account_id) is not None
