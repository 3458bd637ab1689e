"""oftwire constants."""

# Seeds for the adapter program's derived accounts.
SEED_OFT_CONFIG = b"OftConfig"
SEED_PEER = b"Peer"

# Solana PDA rules.
PDA_MARKER = b"ProgramDerivedAddress"
MAX_SEEDS = 16
MAX_SEED_LEN = 32

SELECTOR_NAMESPACE = "global"
SELECTOR_SIZE = 8

EVM_ADDRESS_SIZE = 20
PEER_SIZE = 32

DEFAULT_INIT_METHOD = "init_adapter"
DEFAULT_SET_PEER_METHOD = "set_peer"
DEFAULT_SHARED_DECIMALS = 6

SYSTEM_PROGRAM_ID = "11111111111111111111111111111111"

DEFAULT_RPC_ENDPOINT = "https://api.devnet.solana.com"
DEFAULT_WALLET_PATH = "~/.config/solana/id.json"
DEFAULT_COMMITMENT = "confirmed"

# Public RPC per EVM chain id.
EVM_RPC_URLS = {
    11155111: "https://ethereum-sepolia-rpc.publicnode.com",
}

DEFAULT_EVM_PROJECT_DIR = "./evm"
DEFAULT_DEPLOY_SCRIPT = "script/DeployOFT.s.sol:DeployOFT"
DEFAULT_DEPLOY_SIG = "run(address)"
DEFAULT_ENV_FILE = "evm/.env"
DEFAULT_PRIVATE_KEY_ENV = "PRIVATE_KEY"
EVM_SET_PEER_SIG = "setPeer(uint32,bytes32)"

DEPLOYED_ADDR_MARKER = "DEPLOYED_ADDR:"

DEFAULT_CONFIG_FILE = "oftwire.toml"

# Candidates tried by `oftwire probe` when none are given.
PROBE_CANDIDATES = (
    "init_adapter",
    "initialize",
    "init_oft",
    "init_oft_adapter",
    "initialize_adapter",
    "set_peer",
    "set_peer_config",
)
