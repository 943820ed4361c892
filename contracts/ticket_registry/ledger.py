"""
Non-fungible ticket ledger.

Low-level ownership primitive used by the registry. Each ticket owner is kept
in its own box keyed by the ticket id:

    owner_{id} -> holder address (32 bytes)

A missing box means the ticket has no owner (never minted, or burned).
Every mutation reports success as a bool instead of failing, so callers decide
whether a refusal rejects the transaction or is skipped.
"""

from algopy import Account, Bytes, Global, UInt64, op, subroutine


OWNER_KEY_PREFIX = b"owner_"


@subroutine
def _owner_key(ticket_id: UInt64) -> Bytes:
    return Bytes(OWNER_KEY_PREFIX) + op.itob(ticket_id)


@subroutine
def ledger_owner_of(ticket_id: UInt64) -> tuple[Account, bool]:
    """
    Look up the current holder of a ticket.

    Args:
        ticket_id: ID of the ticket

    Returns:
        Tuple of (owner, exists). Owner is the zero address when absent.
    """
    owner_data, exists = op.Box.get(_owner_key(ticket_id))
    if exists:
        return Account(owner_data), True
    return Global.zero_address, False


@subroutine
def ledger_mint(ticket_id: UInt64, owner: Account) -> bool:
    """
    Create a ticket owned by `owner`.

    Returns:
        False if the ticket already has an owner
    """
    key = _owner_key(ticket_id)
    _data, exists = op.Box.get(key)
    if exists:
        return False
    op.Box.put(key, owner.bytes)
    return True


@subroutine
def ledger_transfer(ticket_id: UInt64, sender: Account, recipient: Account) -> bool:
    """
    Move a ticket from `sender` to `recipient`.

    Returns:
        False if `sender` does not hold the ticket or sends to itself
    """
    if sender == recipient:
        return False
    owner, exists = ledger_owner_of(ticket_id)
    if not exists or owner != sender:
        return False
    op.Box.put(_owner_key(ticket_id), recipient.bytes)
    return True


@subroutine
def ledger_burn(ticket_id: UInt64, owner: Account) -> bool:
    """
    Destroy a ticket held by `owner`.

    Returns:
        False if `owner` does not hold the ticket
    """
    current, exists = ledger_owner_of(ticket_id)
    if not exists or current != owner:
        return False
    op.Box.delete(_owner_key(ticket_id))
    return True
