"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan los transportes concretos.
- Permite invertir dependencias: el Core depende de abstracciones.
"""
