"""LyricGate core: chain lookup, conditions, gateways, purchase orchestration."""
