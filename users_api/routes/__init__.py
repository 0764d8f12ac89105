# Routes package init
"""
Users API — API Routes Package
================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - users.py:   GET    /users          (list all users)
                  GET    /users/{id}     (get one user)
                  POST   /users          (create a user)
                  PUT    /users/{id}     (partial update)
                  DELETE /users/{id}     (delete a user)
    - health.py:  GET    /health         (service health check)

Routes are thin: extract the path id and body, call the service, and pick
the success status code. Failures are raised, not handled, here.
"""
