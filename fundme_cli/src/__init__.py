from dataclasses import dataclass
from typing import Optional


class Constants:
    networks = [
        "hardhat",
        "localhost",
        "sepolia",
        "polygon",
    ]
    development_chains = ["hardhat", "localhost"]
    localhost_entrypoint = "http://127.0.0.1:8545"
    sepolia_entrypoint = "https://rpc.sepolia.org"
    polygon_entrypoint = "https://polygon-rpc.com"
    network_map = {
        "hardhat": None,
        "localhost": localhost_entrypoint,
        "sepolia": sepolia_entrypoint,
        "polygon": polygon_entrypoint,
    }
    chain_id_map = {
        "hardhat": 31337,
        "localhost": 31337,
        "sepolia": 11155111,
        "polygon": 137,
    }
    # Env vars which, when set, override the public RPC entrypoint of a network
    rpc_url_env_vars = {
        "localhost": "LOCALHOST_RPC_URL",
        "sepolia": "SEPOLIA_RPC_URL",
        "polygon": "POLYGON_RPC_URL",
    }
    private_key_env_var = "PRIVATE_KEY"


@dataclass
class NetworkConfig:
    name: str
    eth_usd_price_feed: Optional[str] = None
    block_confirmations: int = 1


# Keyed by chain id
NETWORK_CONFIG = {
    31337: NetworkConfig(name="localhost"),
    11155111: NetworkConfig(
        name="sepolia",
        eth_usd_price_feed="0x694AA1769357215DE4FAC081bf1f309aDC325306",
        block_confirmations=6,
    ),
    137: NetworkConfig(
        name="polygon",
        eth_usd_price_feed="0xF9680D99D6C9589e2a93a78A04A279e509205945",
        block_confirmations=6,
    ),
}

# Mock price feed parameters used on development chains
DECIMALS = 8
INITIAL_ANSWER = 200_000_000_000  # 2000 USD with 8 decimals


class Defaults:
    deploy_tags = ["all"]

    class config:
        base_path = "~/.fundme"
        path = "~/.fundme/config.yml"
        debug_file_path = "~/.fundme/debug.txt"
        dictionary = {
            "network": None,
            "rpc_url": None,
            "deployments_path": None,
            "use_cache": True,
        }

    class network:
        name = "hardhat"
        request_timeout = 60

    class deployments:
        path = "~/.fundme/deployments"

    class named_accounts:
        deployer = 0
        user = 1

    class transactions:
        wait_timeout = 120
        poll_interval = 0.5


defaults = Defaults


# Help Panels for cli help
HELP_PANELS = {
    "FUNDME": {
        "DEPLOY": "Deployment",
        "FUNDING": "Funding & Withdrawal",
        "INFORMATION": "Contract Information",
    },
    "FEED": {
        "PRICE": "Price Feed",
    },
}


class Gettable:
    def __getitem__(self, item):
        return getattr(self, item)


class ColorPalette(Gettable):
    def __init__(self):
        self.GENERAL = self.General()
        self.FUNDS = self.Funds()
        # aliases
        self.G = self.GENERAL
        self.F = self.FUNDS

    class General(Gettable):
        HEADER = "#4196D6"  # Light Blue
        LINKS = "#8CB9E9"  # Sky Blue
        ADDRESS = "#9EF5E4"  # Aqua
        CONTRACT = "#ECC39D"  # Light Orange/Peach
        SUBHEADING = "#AFEFFF"  # Pale Blue
        BALANCE = "#4F91C6"  # Medium Blue
        SUCCESS = "#53B5A0"  # Teal
        ARG = "#DDD5A9"  # Light Khaki
        # aliases
        SUBHEAD = SUBHEADING

    class Funds(Gettable):
        AMOUNT = "#53B5A0"  # Teal
        USD = "#F8D384"  # Light Orange
        GAS = "#C25E7C"  # Rose
        FUNDER = "#D781BB"  # Pink


COLOR_PALETTE = ColorPalette()
COLORS = COLOR_PALETTE
