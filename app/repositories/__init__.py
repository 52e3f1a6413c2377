"""레포지토리 패키지 — 데이터베이스 쿼리 계층.

Repository package — Database query layer.
Each repository extends BaseRepository for generic CRUD and adds
entity-specific queries; PlainMemberRepository shows the same queries
written directly against the session.
"""
