# Services package init
"""
Happy Thoughts Backend — Services Layer
========================================

What:  Logic between routes (HTTP) and the database (persistence).
How:   Services take the request's AsyncSession plus validated schema objects
       and return ORM objects or raise application exceptions.

Service Inventory:
    - ThoughtService: CRUD and like operations on the thoughts table
"""
