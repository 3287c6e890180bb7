"""ERP modules built on top of the ledger kernel."""
