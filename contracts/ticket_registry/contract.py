"""
Ticket Registry Smart Contract

Single-collection ownership registry for event tickets. Every ticket is a
uniquely numbered record held by one account, carrying a metadata URI that
points at off-chain event data.

Features:
- Mint tickets one at a time or in batches of up to 100
- Recipient-initiated (claim) transfers
- Irreversible burn, plus refund for the current holder
- Holder-controlled metadata URI updates
- Read-only queries for owner, URI, burn state and last issued id

Algorand Primitives Used:
- AVM Application (smart contract)
- Global State for the id counter
- Boxes for ownership, metadata and burn flags
- ARC-28 events for every state transition
"""

from algopy import (
    ARC4Contract,
    BoxMap,
    GlobalState,
    String,
    Txn,
    UInt64,
    arc4,
    subroutine,
    uenumerate,
)

from contracts.ticket_registry.events import (
    TicketBurned,
    TicketMinted,
    TicketMintSkipped,
    TicketRefunded,
    TicketTransferred,
    TicketUriUpdated,
)
from contracts.ticket_registry.ledger import (
    ledger_burn,
    ledger_mint,
    ledger_owner_of,
    ledger_transfer,
)
from contracts.ticket_registry.validation import (
    MAX_BATCH_SIZE,
    is_owner,
    is_valid_uri,
)


class TicketRegistry(ARC4Contract):
    """
    Ownership registry for numbered event tickets.

    State Schema:
    - Global State:
        - last_ticket_id: Highest id issued so far (0 before the first mint)

    - Boxes:
        - owner_{id}: Current holder (kept by the ticket ledger)
        - uri_{id}: Metadata URI, kept after burn
        - burned_{id}: Burn flag, absent until the ticket is burned
    """

    def __init__(self) -> None:
        self.last_ticket_id = GlobalState(
            UInt64, key="last_ticket_id", description="Highest ticket id issued"
        )
        self.ticket_uri = BoxMap(UInt64, String, key_prefix=b"uri_")
        self.burned = BoxMap(UInt64, bool, key_prefix=b"burned_")

    @arc4.abimethod(create="require")
    def create(self) -> None:
        """
        Create the ticket registry contract.
        """
        self.last_ticket_id.value = UInt64(0)

    # ------------------------------------------------------------------
    # Minting
    # ------------------------------------------------------------------

    @arc4.abimethod
    def mint_ticket(self, uri: String) -> UInt64:
        """
        Mint a new ticket to the caller.

        Args:
            uri: Metadata URI (1-256 characters)

        Returns:
            The new ticket ID
        """
        assert is_valid_uri(uri), "InvalidUri"

        ticket_id, minted = self._mint_to_caller(uri)
        assert minted, "TicketExists"

        return ticket_id

    @arc4.abimethod
    def batch_mint_tickets(
        self,
        uris: arc4.DynamicArray[arc4.String],
    ) -> arc4.DynamicArray[arc4.UInt64]:
        """
        Mint one ticket per URI, in input order, to the caller.

        Entries that cannot be minted are skipped: they are left out of the
        result and logged as TicketMintSkipped, and the batch carries on.

        On chain, each minted entry creates two boxes (owner_ and uri_) that
        must be referenced by the calling group. With 8 box references per
        app call and 16 transactions per group, at most 64 entries fit in one
        group. The ABI arguments of a single call are also capped at 2KB, so
        long URIs lower the count further. MAX_BATCH_SIZE is the contract
        bound; clients split larger batches to fit those limits.

        Args:
            uris: Metadata URIs, at most 100

        Returns:
            IDs of the tickets actually minted, in mint order
        """
        assert uris.length <= MAX_BATCH_SIZE, "BatchTooLarge"

        minted_ids = arc4.DynamicArray[arc4.UInt64]()
        for index, uri in uenumerate(uris):
            ticket_id, minted = self._mint_to_caller(uri.native)
            if minted:
                minted_ids.append(arc4.UInt64(ticket_id))
            else:
                arc4.emit(TicketMintSkipped(arc4.UInt64(index)))

        return minted_ids

    @subroutine
    def _mint_to_caller(self, uri: String) -> tuple[UInt64, bool]:
        # Counter and URI are only written once the ledger accepted the mint
        if not is_valid_uri(uri):
            return UInt64(0), False

        ticket_id = self.last_ticket_id.value + 1
        if not ledger_mint(ticket_id, Txn.sender):
            return UInt64(0), False

        self.ticket_uri[ticket_id] = uri
        self.last_ticket_id.value = ticket_id

        arc4.emit(TicketMinted(arc4.UInt64(ticket_id), arc4.Address(Txn.sender)))
        return ticket_id, True

    # ------------------------------------------------------------------
    # Ownership changes
    # ------------------------------------------------------------------

    @arc4.abimethod
    def burn_ticket(self, ticket_id: UInt64) -> bool:
        """
        Permanently burn a ticket held by the caller.

        Args:
            ticket_id: ID of the ticket

        Returns:
            True on success
        """
        # The ledger drops the holder on burn, so the flag is checked first
        assert not self._is_burned(ticket_id), "AlreadyBurned"
        owner, exists = ledger_owner_of(ticket_id)
        assert exists, "TicketNotFound"
        assert owner == Txn.sender, "NotTicketOwner: caller does not hold ticket"

        assert ledger_burn(ticket_id, owner), "BurnRejected"
        self.burned[ticket_id] = True

        arc4.emit(TicketBurned(arc4.UInt64(ticket_id), arc4.Address(owner)))
        return True

    @arc4.abimethod
    def transfer_ticket(
        self,
        ticket_id: UInt64,
        sender: arc4.Address,
        recipient: arc4.Address,
    ) -> bool:
        """
        Claim a ticket from its current holder.

        The recipient submits the call: a holder cannot push a ticket to
        someone else.

        Args:
            ticket_id: ID of the ticket
            sender: Current holder
            recipient: New holder, must be the caller

        Returns:
            True on success
        """
        assert recipient.native == Txn.sender, "NotTicketOwner: recipient is not caller"
        assert not self._is_burned(ticket_id), "AlreadyBurned"
        assert is_owner(ticket_id, sender.native), "NotTicketOwner: sender does not hold ticket"

        assert ledger_transfer(ticket_id, sender.native, recipient.native), "TransferRejected"

        arc4.emit(TicketTransferred(arc4.UInt64(ticket_id), sender.copy(), recipient.copy()))
        return True

    @arc4.abimethod
    def refund_ticket(self, ticket_id: UInt64) -> bool:
        """
        Revoke a ticket held by the caller. No funds are moved.

        Args:
            ticket_id: ID of the ticket

        Returns:
            True on success
        """
        owner, exists = ledger_owner_of(ticket_id)
        assert exists, "TicketNotFound"
        assert owner == Txn.sender, "NotTicketOwner: caller does not hold ticket"

        # Unlike burn_ticket there is no burn-flag check here; a second refund
        # is only stopped by the ledger having no owner left for the ticket.
        assert ledger_burn(ticket_id, owner), "BurnRejected"
        self.burned[ticket_id] = True

        arc4.emit(TicketRefunded(arc4.UInt64(ticket_id), arc4.Address(owner)))
        return True

    @arc4.abimethod
    def update_ticket_uri(self, ticket_id: UInt64, uri: String) -> bool:
        """
        Replace the metadata URI of a ticket held by the caller.

        Args:
            ticket_id: ID of the ticket
            uri: New metadata URI (1-256 characters)

        Returns:
            True on success
        """
        owner, exists = ledger_owner_of(ticket_id)
        assert exists, "TicketNotFound"
        assert owner == Txn.sender, "NotTicketOwner: caller does not hold ticket"
        assert is_valid_uri(uri), "InvalidUri"

        # Box size follows the URI length, so drop the old box first
        del self.ticket_uri[ticket_id]
        self.ticket_uri[ticket_id] = uri

        arc4.emit(TicketUriUpdated(arc4.UInt64(ticket_id), arc4.String(uri)))
        return True

    @subroutine
    def _is_burned(self, ticket_id: UInt64) -> bool:
        return self.burned.get(ticket_id, default=False)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @arc4.abimethod(readonly=True)
    def get_owner(self, ticket_id: UInt64) -> arc4.Address:
        """
        Get the current holder of a ticket.

        Args:
            ticket_id: ID of the ticket

        Returns:
            Holder address
        """
        owner, exists = ledger_owner_of(ticket_id)
        assert exists, "TicketNotFound"
        return arc4.Address(owner)

    @arc4.abimethod(readonly=True)
    def get_ticket_uri(self, ticket_id: UInt64) -> String:
        """
        Get the metadata URI of a ticket. Burned tickets keep their last URI.

        Args:
            ticket_id: ID of the ticket

        Returns:
            Metadata URI
        """
        uri, exists = self.ticket_uri.maybe(ticket_id)
        assert exists, "TicketNotFound"
        return uri

    @arc4.abimethod(readonly=True)
    def is_burned(self, ticket_id: UInt64) -> bool:
        """Check whether a ticket has been burned."""
        return self._is_burned(ticket_id)

    @arc4.abimethod(readonly=True)
    def get_last_ticket_id(self) -> UInt64:
        """
        Get the highest ticket ID issued so far.

        Returns:
            Last ticket ID, 0 if nothing was minted
        """
        return self.last_ticket_id.value
