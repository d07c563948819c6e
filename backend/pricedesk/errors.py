from __future__ import annotations


class OfferStoreError(Exception):
    """The offer store could not answer a query (transport, storage, SQL)."""
