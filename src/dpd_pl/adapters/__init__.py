"""Adaptadores de infraestructura.

Por qué un paquete aparte:
- Transportes (zeep/httpx) y exportación a disco; el Core no los importa.
"""
