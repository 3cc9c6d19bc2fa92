"""
Cash transfers between players, the bank and the Free Parking pot.

Every movement of money in the engine goes through :meth:`Ledger.transfer`,
which applies the paired withdraw/deposit before returning.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol

from tycoon.exceptions import InvalidActionError
from tycoon.money import EventLog, EventType

logger = logging.getLogger(__name__)


class Account(Protocol):
    """Anything that holds cash: PlayerState, Bank, FreeParkingPot."""

    account_id: object
    cash: int

    def deposit(self, amount: int) -> None: ...

    def withdraw(self, amount: int) -> None: ...


@dataclass(frozen=True)
class Transfer:
    """Record of a completed transfer, as observed by presentation collaborators."""

    source: Account
    target: Account
    amount: int
    reason: str
    source_balance: int
    target_balance: int
    overdrawn: bool = False

    def __repr__(self) -> str:
        return (
            f"Transfer({self.source.account_id} -> {self.target.account_id}, "
            f"{self.amount}, {self.reason!r})"
        )


TransferListener = Callable[[Transfer], None]


def _is_player(account: Account) -> bool:
    return isinstance(account.account_id, int)


class Ledger:
    """Applies transfers and notifies listeners of each one."""

    def __init__(self, event_log: Optional[EventLog] = None):
        self.event_log = event_log if event_log is not None else EventLog()
        self.listeners: List[TransferListener] = []
        self.history: List[Transfer] = []

    def subscribe(self, listener: TransferListener) -> None:
        self.listeners.append(listener)

    def transfer(self, source: Account, target: Account, amount: int, reason: str = "") -> Transfer:
        """
        Move ``amount`` from ``source`` to ``target``.

        A player source may end below zero; the returned record is flagged
        ``overdrawn`` and the caller applies the bankruptcy policy.

        Raises:
            InvalidActionError: for a negative amount or a self-transfer.
        """
        if amount < 0:
            raise InvalidActionError(f"Transfer amount must be non-negative, got {amount}")
        if source is target:
            raise InvalidActionError("Cannot transfer to the same account")

        source.withdraw(amount)
        target.deposit(amount)

        record = Transfer(
            source=source,
            target=target,
            amount=amount,
            reason=reason,
            source_balance=source.cash,
            target_balance=target.cash,
            overdrawn=_is_player(source) and source.cash < 0,
        )
        self.history.append(record)

        self.event_log.log(
            EventType.TRANSFER,
            player_id=source.account_id if _is_player(source) else None,
            details={
                "from": source.account_id,
                "to": target.account_id,
                "amount": amount,
                "reason": reason,
                "from_balance": source.cash,
                "to_balance": target.cash,
            },
        )
        if record.overdrawn:
            logger.info(f"Account {source.account_id} overdrawn to {source.cash} by {reason or 'transfer'}")

        for listener in self.listeners:
            listener(record)

        return record
