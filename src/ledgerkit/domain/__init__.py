"""Domain layer for ledgerkit.

Services are imported from their own modules (``ledgerkit.domain.chart``,
``ledgerkit.domain.ledger`` and so on); the database layer imports
``ledgerkit.domain.entities`` while this package is still loading.
"""
