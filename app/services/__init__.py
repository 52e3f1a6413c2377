"""서비스 패키지 — 비즈니스 로직 계층.

Service package — Business logic layer.
Services call repositories for DB operations and convert entities into
response schemas before they reach the routers.
"""
