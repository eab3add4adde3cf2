"""Error taxonomy - every failure is raised synchronously as a typed EasyBetError."""

from __future__ import annotations


class EasyBetError(Exception):
    """Base exception for all easybet errors."""


# Referenced entity does not exist


class NotFound(EasyBetError):
    """Referenced activity, ticket or order does not exist."""


class ActivityNotFound(NotFound):
    def __init__(self, activity_id: int) -> None:
        super().__init__(f"Activity {activity_id} does not exist")
        self.activity_id = activity_id


class TicketNotFound(NotFound):
    def __init__(self, ticket_id: int) -> None:
        super().__init__(f"Ticket {ticket_id} does not exist")
        self.ticket_id = ticket_id


class OrderNotFound(NotFound):
    def __init__(self, order_id: int) -> None:
        super().__init__(f"Order {order_id} does not exist")
        self.order_id = order_id


# Caller lacks the required role


class Unauthorized(EasyBetError):
    """Caller is not allowed to perform the operation."""


class NotOwner(Unauthorized):
    """Caller does not currently hold the ticket."""


# Malformed input, rejected before any state mutation


class InvalidInput(EasyBetError):
    """Malformed argument."""


class InvalidConfiguration(InvalidInput):
    """Activity choices/odds are inconsistent or out of range."""


class InvalidChoice(InvalidInput):
    """Outcome index is out of range for the activity."""


class InvalidPrice(InvalidInput):
    """Order price must be positive."""


class InvalidDuration(InvalidInput):
    """Activity duration must be positive."""


class InvalidStake(InvalidInput):
    """Stake amount must be positive."""


# State-machine violations


class StateError(EasyBetError):
    """Operation not permitted in the entity's current state."""


class ActivityExpired(StateError):
    """Deadline has passed; no new stakes are accepted."""


class NotYetExpired(StateError):
    """Deadline has not passed; settlement is not permitted yet."""


class AlreadySettled(StateError):
    """Activity has already been settled."""


ActivityAlreadySettled = AlreadySettled


class OrderInactive(StateError):
    """Order was already filled or cancelled."""


# Value-transfer failures (propagated, never retried)


class TransferError(EasyBetError):
    """The value transfer service rejected a movement of funds."""


class InsufficientBalance(TransferError):
    pass


class InsufficientAllowance(TransferError):
    pass


class EscrowShortfall(TransferError):
    """A release would exceed the funds escrowed for an activity."""
