"""
Clientes API — Services Layer
===============================

Service Inventory:
    - ClienteService: the client resource operations (list, page, get,
      create, update, delete, upload)
    - FileService: writes and deletes photos in the upload directory

Services receive the per-request ClienteStore as an argument and can be
unit-tested with an in-memory store.
"""
