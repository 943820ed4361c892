"""
Tests for the Ticket Registry deployment helpers

Tests cover:
- Environment-driven client and account configuration
- Box storage funding estimates
"""

from pathlib import Path

import pytest
from algosdk import account, mnemonic
from scripts import deploy


class TestDeployConfig:
    """Test suite for deployment configuration."""

    def test_algod_client_defaults_to_localnet(self, monkeypatch: pytest.MonkeyPatch):
        """Test the LocalNet defaults when nothing is configured."""
        # Arrange
        monkeypatch.delenv("ALGOD_SERVER", raising=False)
        monkeypatch.delenv("ALGOD_TOKEN", raising=False)

        # Act
        client = deploy.get_algod_client()

        # Assert
        assert client.algod_address == "http://localhost:4001"
        assert client.algod_token == "a" * 64

    def test_algod_client_from_environment(self, monkeypatch: pytest.MonkeyPatch):
        """Test reading the node address and token from the environment."""
        # Arrange
        monkeypatch.setenv("ALGOD_SERVER", "https://testnet-api.algonode.cloud")
        monkeypatch.setenv("ALGOD_TOKEN", "")

        # Act
        client = deploy.get_algod_client()

        # Assert
        assert client.algod_address == "https://testnet-api.algonode.cloud"
        assert client.algod_token == ""

    def test_deployer_from_mnemonic(self, monkeypatch: pytest.MonkeyPatch):
        """Test restoring the deployer account from DEPLOYER_MNEMONIC."""
        # Arrange
        private_key, address = account.generate_account()
        monkeypatch.setenv("DEPLOYER_MNEMONIC", mnemonic.from_private_key(private_key))

        # Act
        restored_key, restored_address = deploy.get_deployer_account()

        # Assert
        assert restored_key == private_key
        assert restored_address == address

    def test_deployer_generated_without_mnemonic(self, monkeypatch: pytest.MonkeyPatch):
        """Test falling back to a fresh account for LocalNet."""
        # Arrange
        monkeypatch.delenv("DEPLOYER_MNEMONIC", raising=False)

        # Act
        private_key, address = deploy.get_deployer_account()

        # Assert
        assert account.address_from_private_key(private_key) == address

    def test_algod_client_public_network_defaults(self, monkeypatch: pytest.MonkeyPatch):
        """Test the public endpoint defaults for TestNet and MainNet."""
        # Arrange
        monkeypatch.delenv("ALGOD_SERVER", raising=False)
        monkeypatch.delenv("ALGOD_TOKEN", raising=False)

        # Act
        testnet = deploy.get_algod_client("testnet")
        mainnet = deploy.get_algod_client("mainnet")

        # Assert
        assert testnet.algod_address == "https://testnet-api.algonode.cloud"
        assert mainnet.algod_address == "https://mainnet-api.algonode.cloud"
        assert testnet.algod_token == ""
        assert mainnet.algod_token == ""

    def test_network_from_environment(self, monkeypatch: pytest.MonkeyPatch):
        """Test NETWORK selection and its LocalNet default."""
        monkeypatch.delenv("NETWORK", raising=False)
        assert deploy.get_network() == "localnet"

        monkeypatch.setenv("NETWORK", "testnet")
        assert deploy.get_network() == "testnet"

    def test_unknown_network_rejected(self, monkeypatch: pytest.MonkeyPatch):
        """Test that a misspelled NETWORK fails before any node is contacted."""
        monkeypatch.setenv("NETWORK", "betanet")

        with pytest.raises(ValueError, match="Unknown NETWORK"):
            deploy.get_network()

    def test_deployer_required_off_localnet(self, monkeypatch: pytest.MonkeyPatch):
        """Test that TestNet and MainNet never fall back to a generated account."""
        # Arrange
        monkeypatch.delenv("DEPLOYER_MNEMONIC", raising=False)

        # Act / Assert
        with pytest.raises(ValueError, match="DEPLOYER_MNEMONIC not set"):
            deploy.get_deployer_account("testnet")
        with pytest.raises(ValueError, match="DEPLOYER_MNEMONIC not set"):
            deploy.get_deployer_account("mainnet")

    def test_build_dir(self, monkeypatch: pytest.MonkeyPatch):
        """Test the build directory default and override."""
        monkeypatch.delenv("BUILD_DIR", raising=False)
        assert deploy.get_build_dir() == Path("build")

        monkeypatch.setenv("BUILD_DIR", "out/contracts")
        assert deploy.get_build_dir() == Path("out/contracts")


class TestBoxFunding:
    """Test suite for box storage minimum balance estimates."""

    def test_box_mbr(self):
        # 2500 + 400 * (14 + 32)
        assert deploy.box_mbr(14, 32) == 20_900

    def test_funding_without_tickets(self):
        assert deploy.funding_for_tickets(0) == deploy.APP_ACCOUNT_MIN_BALANCE

    def test_funding_per_ticket(self):
        # owner box 20_900 + uri box 417_700 + burned box 11_700
        assert deploy.funding_for_tickets(1) == 100_000 + 450_300
        assert deploy.funding_for_tickets(100) == 100_000 + 100 * 450_300


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
