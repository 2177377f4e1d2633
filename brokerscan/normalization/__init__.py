"""Normalization package.

Reduces heterogeneous broker responses to one common result shape.  The
pipeline runs leaf-first::

    field_extractor -> address_formatter -> record_normalizer -> result_aggregator

Every function in this package is pure: no network, no persistence, no
clock reads (``normalize_one`` stamps ``scanned_at`` on the envelope only).
"""
