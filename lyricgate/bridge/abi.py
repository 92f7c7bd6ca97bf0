"""ABI of the KaraokeAccess contract."""

HAS_SONG_ACCESS = "hasSongAccess"
PURCHASE_SONG = "purchaseSong"

HAS_SONG_ACCESS_ABI = {
    "inputs": [
        {"name": "user", "type": "address"},
        {"name": "songId", "type": "uint256"},
    ],
    "name": HAS_SONG_ACCESS,
    "outputs": [{"name": "", "type": "bool"}],
    "stateMutability": "view",
    "type": "function",
}

PURCHASE_SONG_ABI = {
    "inputs": [{"name": "songId", "type": "uint256"}],
    "name": PURCHASE_SONG,
    "outputs": [],
    "stateMutability": "payable",
    "type": "function",
}

CONTRACT_ABI = [PURCHASE_SONG_ABI, HAS_SONG_ACCESS_ABI]
