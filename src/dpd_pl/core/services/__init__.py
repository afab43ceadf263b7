"""Servicios de dominio (uno por área funcional de DPD).

Cada servicio valida el input, invoca el procedimiento y devuelve modelos
públicos. `sdk.DPDSDK` compone flujos de varios pasos encima.
"""
