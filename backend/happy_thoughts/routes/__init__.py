# Routes package init
"""
Happy Thoughts Backend — API Routes Package
============================================

Route Inventory:
    - health.py:    GET    /                        (endpoint listing)
                    GET    /health                  (service health check)
    - thoughts.py:  GET    /thoughts                (20 newest thoughts)
                    POST   /thoughts                (create)
                    POST   /thoughts/{id}/likes     (like)
                    PATCH  /thoughts/{id}           (partial update)
                    PUT    /thoughts/{id}           (full replace)
                    DELETE /thoughts/{id}           (delete)

Routes stay thin: extract path/body, call ThoughtService, return the result.
"""
