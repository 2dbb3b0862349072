"""
Postboard Backend — Pydantic Schemas Package
==============================================

Request models validate client payloads; record models define the JSON the
API returns. Record models serialize with camelCase keys (`createdAt`,
`firstName`) and accept either spelling on input.
"""
