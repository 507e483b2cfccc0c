# Services package init
"""
TripLink Backend — Services Layer
===================================

What:  Business rules between the routes (HTTP) and the store (persistence).
How:   Each service is a class with one module-level instance. Methods take
       the request's AsyncSession first, then the acting User where the
       operation is gated, and return public response schemas.

Service Inventory:
    - auth_service:      register, login, bearer-token → User
    - catalog_service:   list / create / get services
    - booking_service:   create (priced, availability-checked), confirm,
                         cancel, complete, list, get
    - messaging_service: send, mark_read, list_conversation
    - trip_service:      trips and trip posts

Every failure leaves a service as one of the TripLinkError kinds in
triplink/exceptions.py.
"""
