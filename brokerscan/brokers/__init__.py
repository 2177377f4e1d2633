"""Broker descriptors, the static roster, and per-broker lookup strategies."""
