# Routes package init
"""
Animal Rescue API — API Routes Package
=======================================

What:  HTTP route handlers.

Route Inventory:
    - animals.py: /animals and /animals/{id}, every verb forwarded to the
                  RequestDispatcher
    - health.py:  GET /health (database connectivity probe)

Routes stay thin: they copy the HTTP request into an ApiRequest and copy
the ApiResponse back out. Routing decisions live in the dispatcher.
"""
