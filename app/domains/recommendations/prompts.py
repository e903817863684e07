"""Prompts for the LLM similarity classifier"""

SIMILARITY_SYSTEM_PROMPT = """You compare news articles written in Arabic or English.
Reply with a single number between 0 and 1 and nothing else."""

SIMILARITY_USER_PROMPT = """Compare these two articles and return a similarity score between 0 and 1.

Article 1: "{current_title}" - {current_excerpt}
Article 2: "{candidate_title}" - {candidate_excerpt}

Consider: topic similarity, category match, keyword overlap.
Return only a number between 0 and 1."""
