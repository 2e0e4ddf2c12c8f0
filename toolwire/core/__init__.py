"""Data model, JSON tree mapping, schema validation and privacy masking."""
