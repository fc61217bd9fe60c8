"""
Notebench Backend — Services Layer
====================================

What:  Business logic between routes (HTTP) and the database (persistence).
Why:   Routes stay thin; ownership rules live in one place and are testable
       without HTTP.

Service Inventory:
    - ownership.OwnedResourceService: load-and-authorize + conditional CRUD
    - NoteService / ProjectService: directly owned resources
    - TaskService: tasks scoped through their parent project
    - UserService: registration and login
"""
