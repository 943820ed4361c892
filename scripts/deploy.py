"""
Deployment Script for the Ticket Registry Smart Contract

This script deploys the compiled TicketRegistry contract to an Algorand network
and funds the application account so it can hold ticket boxes.
Run with: python scripts/deploy.py

Build the contract first:
    puyapy contracts/ticket_registry --out-dir build

Environment variables:
- ALGOD_SERVER: Algorand node URL
- ALGOD_TOKEN: Algorand node token
- DEPLOYER_MNEMONIC: 25-word mnemonic for deployer account
- NETWORK: localnet | testnet | mainnet
- BUILD_DIR: Directory holding the PuyaPy TEAL output (default: build)
- EXPECTED_TICKETS: Number of tickets to pre-fund box storage for (default: 100)
"""

import os
import json
import base64
from pathlib import Path
from dotenv import load_dotenv
from algosdk import account, mnemonic
from algosdk.abi import Method
from algosdk.logic import get_application_address
from algosdk.v2client import algod
from algosdk import transaction

# Load environment variables
load_dotenv()


CONTRACT_NAME = "TicketRegistry"

# Global state: last_ticket_id
GLOBAL_INTS = 1
GLOBAL_BYTES = 0

# Box storage minimum balance (microALGOs)
BOX_FLAT_MBR = 2_500
BOX_BYTE_MBR = 400
APP_ACCOUNT_MIN_BALANCE = 100_000

# Worst-case box sizes per ticket: (key length, value length)
TICKET_BOXES = [
    (len(b"owner_") + 8, 32),        # holder address
    (len(b"uri_") + 8, 2 + 1024),    # length-prefixed uri, 256 chars of up to 4 bytes
    (len(b"burned_") + 8, 8),        # burn flag
]

# Public algod endpoints used when ALGOD_SERVER is not set
NETWORK_SERVERS = {
    "localnet": "http://localhost:4001",
    "testnet": "https://testnet-api.algonode.cloud",
    "mainnet": "https://mainnet-api.algonode.cloud",
}

CREATE_METHOD = Method.from_signature("create()void")


def get_network() -> str:
    network = os.getenv("NETWORK", "localnet")
    if network not in NETWORK_SERVERS:
        raise ValueError(f"Unknown NETWORK '{network}', expected one of {sorted(NETWORK_SERVERS)}")
    return network


def get_algod_client(network: str = "localnet") -> algod.AlgodClient:
    """
    Create Algorand client for `network`.

    ALGOD_SERVER and ALGOD_TOKEN override the per-network defaults. Public
    endpoints take an empty token; LocalNet uses the sandbox token.
    """
    server = os.getenv("ALGOD_SERVER", NETWORK_SERVERS[network])
    default_token = "a" * 64 if network == "localnet" else ""
    token = os.getenv("ALGOD_TOKEN", default_token)

    return algod.AlgodClient(token, server)


def get_deployer_account(network: str = "localnet") -> tuple[str, str]:
    """
    Get deployer account from DEPLOYER_MNEMONIC.

    Only LocalNet falls back to a throwaway account; other networks need a
    funded deployer.
    """
    mnemonic_phrase = os.getenv("DEPLOYER_MNEMONIC")

    if not mnemonic_phrase:
        if network != "localnet":
            raise ValueError(f"DEPLOYER_MNEMONIC not set in environment (required for {network})")
        print("Warning: No DEPLOYER_MNEMONIC set. Using generated account for localnet.")
        return account.generate_account()

    private_key = mnemonic.to_private_key(mnemonic_phrase)
    return private_key, account.address_from_private_key(private_key)


def get_build_dir() -> Path:
    return Path(os.getenv("BUILD_DIR", "build"))


def box_mbr(key_length: int, value_length: int) -> int:
    """Minimum balance a single box adds to the application account."""
    return BOX_FLAT_MBR + BOX_BYTE_MBR * (key_length + value_length)


def funding_for_tickets(ticket_count: int) -> int:
    """
    Compute the microALGOs the application account needs to hold
    `ticket_count` tickets with full-length URIs.
    """
    per_ticket = sum(box_mbr(key, value) for key, value in TICKET_BOXES)
    return APP_ACCOUNT_MIN_BALANCE + per_ticket * ticket_count


def compile_contract(client: algod.AlgodClient, teal_path: Path) -> bytes:
    """Compile a TEAL file through the node."""
    compile_response = client.compile(teal_path.read_text())
    return base64.b64decode(compile_response["result"])


def deploy_contract(
    client: algod.AlgodClient,
    private_key: str,
    sender: str,
    approval_program: bytes,
    clear_program: bytes,
) -> int:
    """Create the registry application via its create() ABI method and return the app ID."""
    params = client.suggested_params()

    txn = transaction.ApplicationCreateTxn(
        sender=sender,
        sp=params,
        on_complete=transaction.OnComplete.NoOpOC,
        approval_program=approval_program,
        clear_program=clear_program,
        global_schema=transaction.StateSchema(GLOBAL_INTS, GLOBAL_BYTES),
        local_schema=transaction.StateSchema(0, 0),
        app_args=[CREATE_METHOD.get_selector()],
    )

    signed_txn = txn.sign(private_key)
    tx_id = client.send_transaction(signed_txn)

    # Wait for confirmation
    result = transaction.wait_for_confirmation(client, tx_id, 4)
    return result["application-index"]


def fund_app_account(
    client: algod.AlgodClient,
    private_key: str,
    sender: str,
    app_id: int,
    amount: int,
) -> str:
    """Send the box storage deposit to the application account."""
    params = client.suggested_params()

    txn = transaction.PaymentTxn(
        sender=sender,
        sp=params,
        receiver=get_application_address(app_id),
        amt=amount,
        note=b"ticket-registry-box-funding",
    )

    signed_txn = txn.sign(private_key)
    tx_id = client.send_transaction(signed_txn)
    transaction.wait_for_confirmation(client, tx_id, 4)

    return tx_id


def main():
    """Main deployment function."""
    print("=" * 60)
    print("Ticket Registry - Smart Contract Deployment")
    print("=" * 60)

    network = get_network()
    print(f"\nNetwork: {network}")

    client = get_algod_client(network)

    private_key, deployer = get_deployer_account(network)
    print(f"Deployer: {deployer}")

    build_dir = get_build_dir()
    approval_path = build_dir / f"{CONTRACT_NAME}.approval.teal"
    clear_path = build_dir / f"{CONTRACT_NAME}.clear.teal"

    if not approval_path.exists() or not clear_path.exists():
        print(f"\nCompiled TEAL not found in {build_dir}/")
        print("Build the contract first:")
        print(f"   puyapy contracts/ticket_registry --out-dir {build_dir}")
        raise SystemExit(1)

    print("\n" + "-" * 60)
    print("Contract Deployment")
    print("-" * 60)

    print(f"\n📄 {CONTRACT_NAME}")
    print(f"   Approval: {approval_path}")
    print(f"   Clear: {clear_path}")
    print(f"   Global: {GLOBAL_INTS} ints, {GLOBAL_BYTES} bytes")

    approval_program = compile_contract(client, approval_path)
    clear_program = compile_contract(client, clear_path)

    app_id = deploy_contract(
        client=client,
        private_key=private_key,
        sender=deployer,
        approval_program=approval_program,
        clear_program=clear_program,
    )
    print(f"   ✅ Deployed: App ID {app_id}")

    ticket_count = int(os.getenv("EXPECTED_TICKETS", "100"))
    funding = funding_for_tickets(ticket_count)
    fund_tx = fund_app_account(client, private_key, deployer, app_id, funding)
    print(f"   ✅ Funded app account with {funding / 1_000_000:.6f} ALGO for {ticket_count} tickets")
    print(f"      TX: {fund_tx}")

    # Save deployment info
    output_path = Path("deployment.json")
    deployment_info = {
        "network": network,
        "deployer": deployer,
        "contracts": {
            CONTRACT_NAME: {
                "app_id": app_id,
                "app_address": get_application_address(app_id),
                "box_funding": funding,
            },
        },
    }

    with open(output_path, "w") as f:
        json.dump(deployment_info, f, indent=2)

    print(f"\nDeployment info saved to: {output_path}")


if __name__ == "__main__":
    main()
