"""
Club Ledger

Core modules:
- engine: allocation state machine (arrivals, seating, wait queue, closing)
- models: club configuration, tables and client status variants
- stream_io: reading the text log and dumping emitted records
- trace: helpers for per-event state snapshots (no behavior changes)
"""
