"""Infrastructure layer — document store, vault wiring, template loading.

The service layer reaches the filesystem only through the Store protocol
defined in :mod:`chronolinker.infrastructure.store`.
"""
