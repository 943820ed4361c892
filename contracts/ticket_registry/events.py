"""ARC-28 events emitted by the Ticket Registry."""

from algopy import arc4


class TicketMinted(arc4.Struct):
    ticket_id: arc4.UInt64
    owner: arc4.Address


class TicketMintSkipped(arc4.Struct):
    # Position of the dropped entry in the batch input
    index: arc4.UInt64


class TicketTransferred(arc4.Struct):
    ticket_id: arc4.UInt64
    sender: arc4.Address
    recipient: arc4.Address


class TicketBurned(arc4.Struct):
    ticket_id: arc4.UInt64
    owner: arc4.Address


class TicketRefunded(arc4.Struct):
    ticket_id: arc4.UInt64
    owner: arc4.Address


class TicketUriUpdated(arc4.Struct):
    ticket_id: arc4.UInt64
    uri: arc4.String
