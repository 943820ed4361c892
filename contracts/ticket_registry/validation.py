"""
Validation helpers for the Ticket Registry.

Pure predicates shared by the registry methods. None of them mutate state.
"""

from algopy import Account, String, UInt64, op, subroutine, urange

from contracts.ticket_registry.ledger import ledger_owner_of


# Metadata URI length is counted in characters (UTF-8 code points)
MIN_URI_LENGTH = 1
MAX_URI_LENGTH = 256

# A character takes at most 4 bytes in UTF-8
MAX_URI_BYTES = 1024

# Upper bound on entries accepted by batch_mint_tickets
MAX_BATCH_SIZE = 100


@subroutine
def uri_length(uri: String) -> UInt64:
    """
    Count the characters of a UTF-8 string.

    Every byte that is not a continuation byte (0b10xxxxxx) starts a new
    character.
    """
    data = uri.bytes
    count = UInt64(0)
    for i in urange(data.length):
        if (op.getbyte(data, i) & 0xC0) != 0x80:
            count += 1
    return count


@subroutine
def is_valid_uri(uri: String) -> bool:
    """
    Check that a metadata URI is within the accepted length range.

    Args:
        uri: Candidate metadata URI

    Returns:
        True if 1 <= characters <= 256
    """
    size = uri.bytes.length
    if size < MIN_URI_LENGTH or size > MAX_URI_BYTES:
        return False
    # Never more characters than bytes
    if size <= MAX_URI_LENGTH:
        return True
    return uri_length(uri) <= MAX_URI_LENGTH


@subroutine
def is_owner(ticket_id: UInt64, principal: Account) -> bool:
    """
    Check whether the ledger currently reports `principal` as holder.
    Tickets without an owner (burned or never minted) return False.
    """
    owner, exists = ledger_owner_of(ticket_id)
    return exists and owner == principal
