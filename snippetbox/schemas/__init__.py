"""
Snippetbox — Schemas
=====================

Pydantic models for data leaving the services (`SnippetRead`) and for data
arriving from HTML forms (`SnippetCreateForm`).
"""
