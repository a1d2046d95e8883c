# Routes package init
"""
Postpad — Routes Package
==========================

Route Inventory:
    - pages.py:    GET  /, /login, /register   (login/register forms)
                   GET  /succes                (welcome page after registration)
                   GET  /logout
    - auth.py:     POST /register, POST /login
    - profile.py:  GET  /profile               (gated)
    - posts.py:    POST /dash, /edit/{id}, /delete/{id}  (gated)
    - body.py:     reads urlencoded or JSON request bodies into a dict

Routes stay thin: read the form, call a service, redirect or render.
"""
