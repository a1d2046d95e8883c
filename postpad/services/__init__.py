# Services package init
"""
Postpad — Services Layer
==========================

What:  Business logic between routes (HTTP) and the database (persistence).
How:   Stateless service objects taking the request's AsyncSession, plus the
       app-scoped password hasher and token issuer where a flow needs them.

Service Inventory:
    - UserStore:   credential store (users + ordered post-reference lists)
    - PostStore:   post store
    - AuthService: registration and login flows
    - PostService: profile view and post create/edit/delete flows
"""
