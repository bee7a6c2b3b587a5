"""
Clientes API — API Routes Package
===================================

Route Inventory:
    - clientes.py: /api/clientes CRUD, pagination and photo upload
    - health.py:   GET /health (database and upload directory probe)

Routes stay thin: read the request, call the service, choose the status code.
"""
