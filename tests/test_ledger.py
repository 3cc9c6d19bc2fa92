"""
Tests for cash transfers between players, the bank and the Free Parking pot.
"""

import pytest

from tycoon.exceptions import InvalidActionError
from tycoon.ledger import Ledger
from tycoon.money import Bank, EventLog, EventType, FreeParkingPot
from tycoon.player import PlayerState


def test_transfer_between_players_conserves_cash():
    """Source decreases and target increases by exactly the same amount."""
    ledger = Ledger()
    alice = PlayerState(0, "Alice", 1500)
    bob = PlayerState(1, "Bob", 1500)

    record = ledger.transfer(alice, bob, 120, "rent")

    assert alice.cash == 1380
    assert bob.cash == 1620
    assert alice.cash + bob.cash == 3000
    assert record.amount == 120
    assert record.source_balance == 1380
    assert record.target_balance == 1620
    assert not record.overdrawn


def test_negative_amount_rejected_without_mutation():
    ledger = Ledger()
    alice = PlayerState(0, "Alice", 1500)
    bank = Bank()

    with pytest.raises(InvalidActionError):
        ledger.transfer(alice, bank, -10)

    assert alice.cash == 1500
    assert bank.cash == 0
    assert ledger.history == []


def test_self_transfer_rejected():
    ledger = Ledger()
    alice = PlayerState(0, "Alice", 1500)

    with pytest.raises(InvalidActionError):
        ledger.transfer(alice, alice, 10)


def test_mandatory_charge_can_overdraw_player():
    """Charges always go through; the record is flagged for the bankruptcy policy."""
    ledger = Ledger()
    alice = PlayerState(0, "Alice", 100)
    pot = FreeParkingPot()

    record = ledger.transfer(alice, pot, 200, "tax")

    assert alice.cash == -100
    assert pot.cash == 200
    assert record.overdrawn


def test_bank_may_go_negative_without_flag():
    ledger = Ledger()
    bank = Bank()
    alice = PlayerState(0, "Alice", 0)

    record = ledger.transfer(bank, alice, 200, "go_salary")

    assert bank.cash == -200
    assert alice.cash == 200
    assert not record.overdrawn


def test_listeners_notified_in_order():
    ledger = Ledger()
    seen = []
    ledger.subscribe(seen.append)
    alice = PlayerState(0, "Alice", 1500)
    bob = PlayerState(1, "Bob", 1500)

    first = ledger.transfer(alice, bob, 10)
    second = ledger.transfer(bob, alice, 5)

    assert seen == [first, second]
    assert ledger.history == [first, second]


def test_transfer_logged():
    event_log = EventLog()
    ledger = Ledger(event_log)
    alice = PlayerState(0, "Alice", 1500)

    ledger.transfer(alice, Bank(), 60, "purchase:Old Kent Road")

    events = event_log.of_type(EventType.TRANSFER)
    assert len(events) == 1
    assert events[0].player_id == 0
    assert events[0].details["to"] == "bank"
    assert events[0].details["amount"] == 60


def test_event_log_details():
    log = EventLog()
    log.log(EventType.GO_TO_JAIL, player_id=1)
    log.log(EventType.PASS_GO, player_id=0, details={"salary": 200})

    jail, go = log.get_events()
    assert jail.details == {}
    assert go.details == {"salary": 200}
    assert log.of_type(EventType.PASS_GO) == [go]
