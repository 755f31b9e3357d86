"""Recruiting CRM backend - recruiting pipeline engine."""
