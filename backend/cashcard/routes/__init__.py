"""
Cash Card Service - API Routes Package
========================================

Route Inventory:
    - cash_cards.py: GET  /cashcards/{id}   (single card)
                     POST /cashcards        (create)
                     GET  /cashcards        (paged, sorted listing)
    - health.py:     GET  /health           (service health check)
"""
