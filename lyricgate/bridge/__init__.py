"""Bridge layer between LyricGate and its external services.

Modules
-------
abi
    ABI fragments of the KaraokeAccess contract.
ledger
    ``LedgerClient`` protocol and the web3.py implementation.  Translates
    node errors into a closed ``LedgerErrorKind`` enumeration.
lit_network
    ``ThresholdNetworkClient`` protocol and the Lit Protocol implementation.
    The Lit SDK is optional; without it the client refuses to construct.

Core modules depend on the protocols only, so every gateway can be run
against substitute clients.
"""
