"""Core del cliente: sesión, invocador, validador y servicios.

Por qué separado de `adapters`:
- El Core no importa zeep ni construye clientes HTTP; recibe handles que
  cumplen `core.interfaces.transport.ConnectionHandle`.
"""
