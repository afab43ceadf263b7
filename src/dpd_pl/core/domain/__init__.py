"""Modelos y contratos del dominio.

Por qué:
- Aquí viven las estructuras de datos puras y estrictas (Pydantic v2).
- `models`/`requests` son lo que ve el llamador; `contracts` es la forma de
  los datos tal como llegan de la red.
"""
