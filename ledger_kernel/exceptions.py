"""
Typed Exception Hierarchy for the Ledger Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers (entry forms, report pages, import scripts) must react to ledger
failures precisely. Every failure therefore has:
  1. A TYPED exception class (catch by type, not message)
  2. A CODE attribute (machine-readable, API-safe)
  3. Structured DATA attributes (the offending values)

Example - WRONG way to handle errors:
    try:
        journal.create_entry(entry_date, "Rent", lines)
    except Exception as e:
        if "debits" in str(e):  # FRAGILE - message might change
            show_unbalanced_banner()

Example - RIGHT way (what this module enables):
    try:
        journal.create_entry(entry_date, "Rent", lines)
    except UnbalancedEntryError as e:
        show_error(f"Off by {e.difference}")              # Structured data
        api_response(code=e.code, debits=e.total_debits)  # Machine-readable

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from LedgerKernelError:

    LedgerKernelError (base)
    |
    +-- EntryValidationError (carries .kind)
    |   +-- InsufficientLinesError
    |   +-- LineHasBothDebitAndCreditError
    |   +-- UnbalancedEntryError
    |
    +-- JournalError
    |   +-- JournalEntryNotFoundError
    |
    +-- AccountError
    |   +-- AccountNotFoundError
    |   +-- DuplicateAccountCodeError
    |   +-- AccountReferencedError
    |
    +-- ActivityError
        +-- ActivityNotFoundError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category    | Code                            | When Raised
------------|---------------------------------|-----------------------------------
Validation  | INSUFFICIENT_LINES              | < 2 substantive lines submitted
            | LINE_HAS_BOTH_DEBIT_AND_CREDIT  | One line carries both amounts
            | UNBALANCED_ENTRY                | |debits - credits| > tolerance
------------|---------------------------------|-----------------------------------
Journal     | JOURNAL_ENTRY_NOT_FOUND         | Entry ID doesn't exist
------------|---------------------------------|-----------------------------------
Account     | ACCOUNT_NOT_FOUND               | Account ID doesn't exist
            | DUPLICATE_ACCOUNT_CODE          | Code already used by an account
            | ACCOUNT_REFERENCED              | Account has journal lines
------------|---------------------------------|-----------------------------------
Activity    | ACTIVITY_NOT_FOUND              | Activity ID doesn't exist

===============================================================================
HANDLING PATTERNS
===============================================================================

Every validation failure is a rejected input, never a system fault. Nothing
is persisted when one is raised, so the caller may re-prompt the user:

    try:
        record = journal.create_entry(entry_date, description, lines)
    except EntryValidationError as e:
        return {"error": e.code, "kind": e.kind, "message": str(e)}

===============================================================================
"""

from decimal import Decimal


class LedgerKernelError(Exception):
    """
    Base exception for all ledger kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "LEDGER_KERNEL_ERROR"


# Entry validation exceptions


class EntryValidationError(LedgerKernelError):
    """
    Base exception for rejected journal entry line sets.

    `kind` names the rule that failed; it matches the vocabulary used by
    the entry form (InsufficientLines, LineHasBothDebitAndCredit, Unbalanced).
    """

    code: str = "ENTRY_VALIDATION_ERROR"
    kind: str = "Invalid"


class InsufficientLinesError(EntryValidationError):
    """Fewer than the required number of substantive lines were submitted."""

    code: str = "INSUFFICIENT_LINES"
    kind: str = "InsufficientLines"

    def __init__(self, line_count: int, minimum: int = 2):
        self.line_count = line_count
        self.minimum = minimum
        super().__init__(
            f"At least {minimum} journal entry lines are required, got {line_count}"
        )


class LineHasBothDebitAndCreditError(EntryValidationError):
    """A single line specifies both a debit and a credit amount."""

    code: str = "LINE_HAS_BOTH_DEBIT_AND_CREDIT"
    kind: str = "LineHasBothDebitAndCredit"

    def __init__(
        self,
        line_index: int,
        account_id: int | None,
        debit: Decimal,
        credit: Decimal,
    ):
        self.line_index = line_index
        self.account_id = account_id
        self.debit = debit
        self.credit = credit
        super().__init__(
            f"Line {line_index} (account {account_id}) cannot have both "
            f"debit {debit} and credit {credit}"
        )


class UnbalancedEntryError(EntryValidationError):
    """Total debits and total credits differ by more than the tolerance."""

    code: str = "UNBALANCED_ENTRY"
    kind: str = "Unbalanced"

    def __init__(self, total_debits: Decimal, total_credits: Decimal):
        self.total_debits = total_debits
        self.total_credits = total_credits
        super().__init__(
            f"Total debits must equal total credits: "
            f"debits={total_debits}, credits={total_credits}"
        )

    @property
    def difference(self) -> Decimal:
        return abs(self.total_debits - self.total_credits)


# Journal-related exceptions


class JournalError(LedgerKernelError):
    """Base exception for journal entry store errors."""

    code: str = "JOURNAL_ERROR"


class JournalEntryNotFoundError(JournalError):
    """Journal entry with given ID was not found."""

    code: str = "JOURNAL_ENTRY_NOT_FOUND"

    def __init__(self, entry_id: int):
        self.entry_id = entry_id
        super().__init__(f"Journal entry not found: {entry_id}")


# Account-related exceptions


class AccountError(LedgerKernelError):
    """Base exception for account-related errors."""

    code: str = "ACCOUNT_ERROR"


class AccountNotFoundError(AccountError):
    """Account was not found."""

    code: str = "ACCOUNT_NOT_FOUND"

    def __init__(self, account_id: int):
        self.account_id = account_id
        super().__init__(f"Account not found: {account_id}")


class DuplicateAccountCodeError(AccountError):
    """Another account already uses this code."""

    code: str = "DUPLICATE_ACCOUNT_CODE"

    def __init__(self, account_code: str):
        self.account_code = account_code
        super().__init__(f"Account code already in use: {account_code}")


class AccountReferencedError(AccountError):
    """Account is referenced by journal lines and the operation would rewrite history."""

    code: str = "ACCOUNT_REFERENCED"

    def __init__(self, account_id: int, operation: str = "delete"):
        self.account_id = account_id
        self.operation = operation
        super().__init__(
            f"Cannot {operation} account {account_id}: referenced by journal lines"
        )


# Activity log exceptions


class ActivityError(LedgerKernelError):
    """Base exception for activity log errors."""

    code: str = "ACTIVITY_ERROR"


class ActivityNotFoundError(ActivityError):
    """Activity record with given ID was not found."""

    code: str = "ACTIVITY_NOT_FOUND"

    def __init__(self, activity_id: int):
        self.activity_id = activity_id
        super().__init__(f"Activity not found: {activity_id}")
