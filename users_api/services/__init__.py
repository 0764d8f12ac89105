# Services package init
"""
Users API — Services Layer
============================

What:  Business logic layer sitting between routes (HTTP) and stores (persistence).
How:   Services receive their store at construction time, take schema objects,
       and return schema objects or raise application exceptions.

Service Inventory:
    - UserService: list/get/create/update/delete over the User resource

Services never build HTTP responses; status codes come from the exception
handlers registered in users_api.main.
"""
