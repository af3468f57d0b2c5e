import base58  # type: ignore[import-untyped]
import pytest
from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from txbuilder.constants import CUSDC_MINT, USDC_MINT
from txbuilder.pda import derive_associated_token_address, derive_obligation_address

WALLET = "4uQeVj5tqViQh7yWWGStvkEG1Zmhx6uasJtWCJziofM"
RECIPIENT = "dzrevZC94tBLwuHw1dyynZxaXTWyp7yocsinyEVPtt4"
BLOCKHASH = base58.b58encode(bytes(range(32))).decode()


@pytest.fixture
def wallet() -> str:
    return WALLET


@pytest.fixture
def recipient() -> str:
    return RECIPIENT


@pytest.fixture
def lifetime() -> dict:
    return {"blockhash": BLOCKHASH, "last_valid_block_height": 250_000_000}


@pytest.fixture
def solend_prepared(lifetime) -> dict:
    owner = Pubkey.from_string(WALLET)
    return {
        "lifetime": lifetime,
        "user_usdc_ata": str(derive_associated_token_address(owner, USDC_MINT)),
        "user_cusdc_ata": str(derive_associated_token_address(owner, CUSDC_MINT)),
        "obligation_account": str(derive_obligation_address(owner)),
        "usdc_ata_exists": True,
        "cusdc_ata_exists": True,
        "obligation_exists": True,
    }
