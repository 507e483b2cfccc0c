# Routes package init
"""
TripLink Backend — API Routes Package
=======================================

Route Inventory:
    - auth.py:      POST /api/auth/register, POST /api/auth/login, GET /api/auth/me
    - services.py:  GET/POST /api/services, GET /api/services/{id}
    - bookings.py:  POST/GET /api/bookings, GET /api/bookings/{id},
                    PATCH /api/bookings/{id}/confirm|cancel|complete
    - messages.py:  POST /api/messages, GET /api/messages/{conversationId},
                    PATCH /api/messages/{id}/read
    - trips.py:     POST/GET /api/trips, GET /api/trips/{id},
                    POST/GET /api/trips/{id}/posts
    - health.py:    GET /api/health

Routes stay thin: parse the request, resolve the acting user, call one
service method, return its schema. Errors propagate to the handlers in main.py.
"""
