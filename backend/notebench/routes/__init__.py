"""
Notebench Backend — API Routes Package
========================================

Route Inventory:
    - notes.py:     /api/notes[/{id}]                       (Note CRUD)
    - projects.py:  /api/project[/{id}]                     (Project CRUD)
                    /api/project/{id}/tasks[/{task_id}]     (Task CRUD)
    - users.py:     /api/users, /api/users/login, /api/users/me
    - health.py:    /health

Routes are thin: resolve the caller, call a service, return its result.
Ownership rules live in notebench.services.ownership.
"""
