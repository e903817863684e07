"""Cross-cutting infrastructure: settings, database, errors, logging and LLM access"""
