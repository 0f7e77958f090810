"""Core domain: deal rules, forms and services."""
